import logging
import os

DATABASE_URL = os.getenv("LIBRARYDB_URL", "sqlite:///./librarydb.db")
LOG_LEVEL = os.getenv("LIBRARYDB_LOG", "INFO")
# default loan length for borrow_book, in days
LOAN_DAYS = int(os.getenv("LIBRARYDB_LOAN_DAYS", "14"))


def configure_logging(level: str = LOG_LEVEL):
    logging.basicConfig(level=level,
                        format="%(asctime)s %(levelname)s %(name)s - %(message)s")
