from datetime import date


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_create_member_and_book_and_borrow_return(client):
    # Create member
    member = {"member_name": "Test User", "email": "test@example.com"}
    r = client.post("/members/", json=member)
    assert r.status_code == 200
    member_id = r.json()["member_id"]
    assert r.json()["join_date"] == date.today().isoformat()

    # Create book
    book = {"title": "Test Book", "author": "Author", "genre": "Testing", "total_copies": 1}
    r = client.post("/books/", json=book)
    assert r.status_code == 200
    book_id = r.json()["book_id"]
    assert r.json()["available_copies"] == 1

    # Borrow book
    r = client.post(f"/borrowings/borrow?member_id={member_id}&book_id={book_id}&days=7")
    assert r.status_code == 200
    borrowing_id = r.json()["borrowing_id"]
    assert r.json()["return_date"] is None

    r = client.get("/views/current_borrowings")
    assert [row["borrowing_id"] for row in r.json()] == [borrowing_id]
    # last copy is out
    assert client.get("/views/available_books").json() == []
    r = client.post(f"/borrowings/borrow?member_id={member_id}&book_id={book_id}")
    assert r.status_code == 400

    # Return book
    r = client.post(f"/borrowings/{borrowing_id}/return")
    assert r.status_code == 200
    assert r.json()["return_date"] == date.today().isoformat()
    r = client.post(f"/borrowings/{borrowing_id}/return")
    assert r.status_code == 400


def test_duplicate_email_conflict(client):
    member = {"member_name": "A", "email": "dup@example.com"}
    assert client.post("/members/", json=member).status_code == 200
    r = client.post("/members/", json=member)
    assert r.status_code == 409


def test_unknown_book(client):
    r = client.get("/books/123")
    assert r.status_code == 404
    assert r.json()["detail"] == "Book not found"


def test_delete_book_with_borrowings_conflict(client, seeded):
    assert client.delete("/books/1").status_code == 409
    assert client.get("/books/1").status_code == 200


def test_view_listing(client):
    r = client.get("/views/")
    assert r.status_code == 200
    assert {v["name"]: v["capability"] for v in r.json()}["available_books"] == "check-option"


def test_read_views(client, seeded):
    assert len(client.get("/views/active_members").json()) == 3
    genres = {row["genre"] for row in client.get("/views/books_by_genre").json()}
    assert genres == {"Programming", "Fiction", "Self-help"}
    assert len(client.get("/views/book_titles").json()) == 5
    r = client.get("/views/overdue_books", params={"as_of": "2025-10-10"})
    assert r.json() == [{
        "borrowing_id": 1, "book_id": 1, "title": "Clean Code", "member_id": 1,
        "member_name": "Alice Kumar", "borrow_date": "2025-09-20", "due_date": "2025-10-04",
        "days_overdue": 6,
    }]


def test_update_through_book_titles(client, seeded):
    r = client.patch("/views/book_titles/1", json={"title": "Clean Code, Revised"})
    assert r.status_code == 200
    assert r.json() == {"book_id": 1, "title": "Clean Code, Revised"}
    book = client.get("/books/1").json()
    assert book["title"] == "Clean Code, Revised"
    assert book["author"] == "Robert C. Martin"
    assert book["available_copies"] == 2


def test_check_option_through_available_books(client, seeded):
    r = client.patch("/views/available_books/1", json={"available_copies": 0})
    assert r.status_code == 409
    assert "check option" in r.json()["detail"]
    assert client.get("/books/1").json()["available_copies"] == 2
    ids = {row["book_id"] for row in client.get("/views/available_books").json()}
    assert ids == {1, 2, 4, 5}


def test_writes_through_read_only_views(client, seeded):
    assert client.patch("/views/current_borrowings/1", json={"title": "x"}).status_code == 405
    assert client.post("/views/books_by_genre", json={"genre": "x"}).status_code == 405
    assert client.delete("/views/overdue_books/1").status_code == 405
    assert client.patch("/views/nope/1", json={"title": "x"}).status_code == 404


def test_insert_through_book_titles_needs_author(client, seeded):
    r = client.post("/views/book_titles", json={"title": "No Author"})
    assert r.status_code == 409


def test_mistyped_write_through_available_books(client, seeded):
    r = client.patch("/views/available_books/1", json={"available_copies": "lots"})
    assert r.status_code == 400
    assert "available_copies" in r.json()["detail"]
    assert client.get("/books/1").json()["available_copies"] == 2
    r = client.get("/views/available_books")
    assert r.status_code == 200
    assert {row["book_id"]: row["available_copies"] for row in r.json()}[1] == 2


def test_borrow_loan_length_is_bounded(client, seeded):
    r = client.post("/borrowings/borrow", params={"member_id": 3, "book_id": 4, "days": 10**9})
    assert r.status_code == 422
    assert client.get("/books/4").json()["available_copies"] == 4


def test_unknown_view_read(client):
    r = client.get("/views/no_such_view")
    assert r.status_code == 404
    assert "no_such_view" in r.json()["detail"]
