"""Entry point for the campus-eats Textual app."""

from __future__ import annotations

from campus_eats.campus_app import CampusOrderApp
from campus_eats.log import configure_logging
from campus_eats.ordering import create_session


def main() -> None:
    configure_logging()
    session = create_session()
    try:
        CampusOrderApp(session).run()
    finally:
        session.close()


if __name__ == "__main__":
    main()
