import argparse

from app.core.config import configure_logging
from app.core.database import SessionLocal, engine
from app.seed import seed_sample_data
from app.views.ddl import create_schema


def main(argv=None):
    parser = argparse.ArgumentParser(description='Library database utilities')
    parser.add_argument('--initdb', action='store_true', help='Create tables and views')
    parser.add_argument('--seed', action='store_true', help='Seed sample data')
    args = parser.parse_args(argv)
    configure_logging()
    if args.initdb or args.seed:
        create_schema(engine)
    if args.seed:
        db = SessionLocal()
        try:
            seed_sample_data(db)
        finally:
            db.close()
    print('Done')


if __name__ == '__main__':
    main()
