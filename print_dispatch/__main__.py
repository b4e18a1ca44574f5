"""
Server entry point: python -m print_dispatch (or the print-dispatch script).
"""

from dotenv import load_dotenv

from print_dispatch import create_app
from print_dispatch.core.config import get_config_dir, get_host, get_port


def main() -> None:
    load_dotenv()
    app = create_app()
    host, port = get_host(), get_port()
    app.logger.info("================================")
    app.logger.info("PRINT DISPATCH SERVER RUNNING")
    app.logger.info("Local URL : http://localhost:%d", port)
    app.logger.info("Server ID : %s", app.config["SERVER_ID"])
    app.logger.info("Auth      : %s", "ENABLED" if app.config["ENABLE_AUTH"] else "DISABLED")
    app.logger.info("Config    : %s", get_config_dir())
    app.logger.info("================================")
    app.run(host=host, port=port, debug=False, threaded=True)


if __name__ == "__main__":
    main()
