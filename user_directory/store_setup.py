"""Initialise the JSON file backing the user directory."""

import json
import os

from loguru import logger

from .store import UserStore, StoreReadError


SAMPLE_USERS = [
    {
        "id": 1,
        "name": "John Doe",
        "email": "john.doe@example.com",
        "address": "1234 Elm Street, Springfield, USA",
        "phone": "555-123-4567",
    },
]


class StoreSetup:
    """Creates and seeds the users file."""

    def __init__(self, path: str):
        """
        Args:
            path: Path to the users JSON file
        """
        self.path = path

        # Ensure directory exists
        os.makedirs(os.path.dirname(os.path.abspath(self.path)), exist_ok=True)

    def exists(self) -> bool:
        return os.path.exists(self.path)

    def insert_sample_data(self, overwrite: bool = False) -> None:
        """Write the sample users, leaving an existing file alone unless ``overwrite``."""
        if self.exists() and not overwrite:
            logger.info("Users file already exists, skipping insertion.")
            return

        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(SAMPLE_USERS, f, indent=2)
        logger.info("Sample data inserted into {} ({} users)", self.path, len(SAMPLE_USERS))

    def verify_data(self) -> int:
        """Load the file back through the store and return the user count."""
        count = len(UserStore(self.path).list_users())
        logger.info("Users file {} holds {} users", self.path, count)
        return count


def ensure_store(path: str) -> bool:
    """
    Create the users file with sample data if it does not exist yet.

    Returns:
        True if the file was created, False if it was already there
    """
    setup = StoreSetup(path)
    if setup.exists():
        return False
    setup.insert_sample_data()
    setup.verify_data()
    return True


def main():
    """Reset the users file to the sample data."""
    from .config import get_settings
    from .log_config import setup_logging

    setup_logging()
    setup = StoreSetup(get_settings().users_file)
    try:
        setup.insert_sample_data(overwrite=True)
        setup.verify_data()
        print("\nUsers file setup complete!")
    except (OSError, StoreReadError) as e:
        print(f"Error: {e}")


if __name__ == "__main__":
    main()
