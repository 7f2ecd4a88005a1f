from bookshelf.core.models import Book, ReadingStatus
from bookshelf.core.transitions import (
    apply_progress,
    apply_status,
    progress_percentage,
    status_label,
)

TODAY = "2024-05-01"


def make_book(**kwargs):
    defaults = {"id": "b1", "title": "Dune", "author": "Frank Herbert"}
    defaults.update(kwargs)
    return Book(**defaults)


def test_reading_stamps_start_date_once():
    started = apply_status(make_book(), "reading", TODAY)
    assert started.status is ReadingStatus.READING
    assert started.start_date == TODAY

    again = apply_status(started, ReadingStatus.READING, "2024-06-01")
    assert again.start_date == TODAY


def test_completed_stamps_end_date_when_unset():
    done = apply_status(make_book(status="reading"), "completed", TODAY)
    assert done.end_date == TODAY


def test_completed_keeps_existing_end_date():
    done = apply_status(make_book(end_date="2023-12-31"), "completed", TODAY)
    assert done.end_date == "2023-12-31"


def test_completed_explicit_end_date_wins():
    done = apply_status(make_book(end_date="2023-12-31"), "completed", TODAY, end_date="2024-02-02")
    assert done.end_date == "2024-02-02"


def test_want_to_read_leaves_dates_alone():
    book = make_book(status="reading", start_date="2024-01-01")
    back = apply_status(book, "wantToRead", TODAY)
    assert back.status is ReadingStatus.WANT_TO_READ
    assert back.start_date == "2024-01-01"
    assert back.end_date is None


def test_progress_moves_book_to_reading():
    book = apply_progress(make_book(page_count=412), 100, TODAY)
    assert book.status is ReadingStatus.READING
    assert book.current_page == 100
    assert book.start_date == TODAY
    assert book.end_date is None


def test_progress_at_last_page_completes():
    book = apply_progress(make_book(page_count=412, status="reading", start_date="2024-04-01"), 412, TODAY)
    assert book.status is ReadingStatus.COMPLETED
    assert book.end_date == TODAY
    assert book.start_date == "2024-04-01"


def test_progress_past_last_page_is_clamped():
    book = apply_progress(make_book(page_count=300), 350, TODAY)
    assert book.status is ReadingStatus.COMPLETED
    assert book.current_page == 300


def test_progress_without_page_count_stays_reading():
    book = apply_progress(make_book(), 5000, TODAY)
    assert book.status is ReadingStatus.READING
    assert book.current_page == 5000


def test_progress_percentage():
    assert progress_percentage(make_book(status="reading", page_count=281, current_page=120)) == 43
    assert progress_percentage(make_book(status="reading", current_page=120)) == 0
    assert progress_percentage(make_book(status="completed", page_count=281, current_page=281)) == 0


def test_status_label():
    assert status_label("reading") == "Currently Reading"
    assert status_label(ReadingStatus.WANT_TO_READ) == "Want to Read"


def test_progress_on_zero_page_book_completes():
    book = apply_progress(make_book(page_count=0), 50, TODAY)
    assert book.status is ReadingStatus.COMPLETED
    assert book.end_date == TODAY
    assert book.current_page == 0


def test_progress_percentage_zero_page_book():
    assert progress_percentage(make_book(status="reading", page_count=0, current_page=0)) == 0
