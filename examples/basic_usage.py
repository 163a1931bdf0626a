"""Basic usage example for the Readwise client."""

import os

from dotenv import load_dotenv

from readwise import auth, setup_logging
from readwise.exceptions import AuthenticationError, ResponseError


def main():
    """List a page of books and highlights, then create, edit and delete a highlight."""
    load_dotenv()
    setup_logging("INFO")

    try:
        client = auth(os.environ["ACCESS_TOKEN"])
    except AuthenticationError as e:
        print(f"Token rejected: HTTP {e.status_code}")
        return

    with client:
        print("Books on page 1:")
        for book in client.get_books(1):
            print(f"  {book.title}")

        print("\nHighlights on page 1:")
        for highlight in client.get_highlights(1):
            print(f"  {highlight.id}: {highlight.text[:60]}")

        created = client.create_highlights([{"text": "hello world!"}])
        for highlight in created:
            print(f"\nCreated highlight {highlight.id}: {highlight.text}")

        if created:
            updated = client.update_highlight(created[0].id, {"text": "hello, world!"})
            print(f"Updated highlight {updated.id}: {updated.text}")

            try:
                client.delete_highlight(updated.id)
                print(f"Deleted highlight {updated.id}")
            except ResponseError as e:
                print(f"Delete failed: HTTP {e.status_code}")


if __name__ == "__main__":
    main()
