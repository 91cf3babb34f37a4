import random
import sys

import sqlsession

url = sys.argv[1] if len(sys.argv) > 1 else "file:books.db"

def main():
    config = sqlsession.SessionConfig(host=url)
    with sqlsession.Session(config) as session:
        if not session.connect():
            sys.exit(f"could not connect to {url}: {session.last_error}")

        session.execute(
            """
            CREATE TABLE IF NOT EXISTS book (
                id INTEGER PRIMARY KEY,
                title TEXT NOT NULL,
                author_id INTEGER NOT NULL
            )
            """
        )
        session.execute(
            """
            CREATE TABLE IF NOT EXISTS author (
                id INTEGER PRIMARY KEY,
                name TEXT NOT NULL
            )
            """
        )

        author_name = session.escape(sample_name(AUTHOR_NAME_PARTS))
        author_id = session.query_single_int(f"INSERT INTO author (name) VALUES ({author_name}) RETURNING id")

        book_count = random.randint(1, 3)
        for _ in range(book_count):
            title = session.escape(sample_name(BOOK_TITLE_PARTS))
            session.execute(f"INSERT INTO book (title, author_id) VALUES ({title}, {author_id})")

        print("books:", session.query_single_int("SELECT count(*) FROM book"))

        session.execute(
            """
            SELECT b.id AS book_id, b.title AS title, a.name AS author
            FROM book b JOIN author a ON b.author_id = a.id
            ORDER BY b.id ASC
            """
        )
        for row in session.iter_rows():
            print(row.get_int32("book_id"), row.get_string("title"), "by", row.get_string("author"))

AUTHOR_NAME_PARTS = [
    ["Daniel", "Jane", "Mark", "William", "Milan", "Kazuo", "Sally", "Mieko", "Kim"],
    ["Defoe", "Austen", "Twain", "Golding", "Kundera", "Ishiguro", "Rooney", "Kawakami", "Hye-Jin"],
]

BOOK_TITLE_PARTS = [
    [
        "Robinson", "Pride", "Sense", "Huckleberry", "Tom", "Lord",
        "Život", "Klara", "Normal", "Concerning", "Nineteen",
    ],
    [
        "Crusoe", "and Prejudice", "and Sensibility", "Finn", "Sawyer", "of the Flies",
        "je jinde", "and The Sun", "People", "My Daughter", "Eighty-Four",
    ],
]

def sample_name(name_parts):
    return " ".join([
        random.choice(parts)
        for parts in name_parts
    ])

main()
