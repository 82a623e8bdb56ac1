import argparse

import uvicorn

from app.core.config import settings


def main(argv=None):
    parser = argparse.ArgumentParser(description='Library service')
    parser.add_argument('--initdb', action='store_true', help='Create tables and seed default books, then exit')
    parser.add_argument('--host', default=settings.host)
    parser.add_argument('--port', type=int, default=settings.port)
    args = parser.parse_args(argv)

    if args.initdb:
        from app.core.bootstrap import init_db
        from app.core.database import engine
        from app.core.logging_config import setup_logging
        setup_logging()
        init_db(engine)
        return 0

    uvicorn.run("app.main:app", host=args.host, port=args.port, log_level=settings.log_level.lower())
    return 0


if __name__ == '__main__':
    raise SystemExit(main())
