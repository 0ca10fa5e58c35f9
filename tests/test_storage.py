import pytest

from fichiers.core.errors import FileMissingError, InvalidFilenameError
from fichiers.core.metrics import MetricsStore
from fichiers.services.conversions import FileFormat, converted_name
from fichiers.storage import STAGING_PREFIX, FileStorage


def test_root_created_with_missing_parents(tmp_path):
    root = tmp_path / "a" / "b" / "uploads_files"
    storage = FileStorage(root)
    assert root.is_dir()
    assert storage.root == root.resolve()


def test_existing_root_is_reused(tmp_path):
    (tmp_path / "keep.txt").write_bytes(b"keep")
    storage = FileStorage(tmp_path)
    assert storage.list_all() == ["keep.txt"]


def test_root_that_is_a_file_fails(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("x")
    with pytest.raises(OSError):
        FileStorage(blocker)


def test_staged_file_hidden_until_commit(tmp_path):
    storage = FileStorage(tmp_path)
    staged = storage.stage(b"data", "file.txt")
    assert staged.name.startswith(STAGING_PREFIX)
    assert storage.list_all() == []
    assert not storage.exists("file.txt")

    storage.commit(staged, "file.txt")
    assert storage.list_all() == ["file.txt"]
    assert (tmp_path / "file.txt").read_bytes() == b"data"
    assert not staged.exists()


def test_discard_keeps_previous_bytes(tmp_path):
    storage = FileStorage(tmp_path)
    storage.write("file.txt", b"old")
    staged = storage.stage(b"new", "file.txt")
    storage.discard(staged)
    assert (tmp_path / "file.txt").read_bytes() == b"old"
    assert storage.list_all() == ["file.txt"]


@pytest.mark.parametrize("name", ["", "../escape.txt", "..", "."])
def test_write_rejects_names_outside_root(tmp_path, name):
    storage = FileStorage(tmp_path / "root")
    with pytest.raises(InvalidFilenameError):
        storage.write(name, b"x")


def test_reads_outside_root_are_not_found(tmp_path):
    storage = FileStorage(tmp_path / "root")
    (tmp_path / "secret.txt").write_text("nope")
    assert not storage.exists("../secret.txt")
    with pytest.raises(FileMissingError):
        storage.open_for_download("../secret.txt")
    with pytest.raises(FileMissingError):
        storage.delete("../secret.txt")


def test_attributes_read_from_disk(tmp_path):
    storage = FileStorage(tmp_path)
    storage.write("sized.bin", b"0123456789")
    attrs = storage.attributes("sized.bin")
    assert attrs["name"] == "sized.bin"
    assert attrs["size"] == 10
    assert len(attrs["creation_time"]) == len("2024-01-01 00:00:00")


def test_delete_removes_file(tmp_path):
    storage = FileStorage(tmp_path)
    storage.write("bye.txt", b"x")
    storage.delete("bye.txt")
    assert not storage.exists("bye.txt")
    with pytest.raises(FileMissingError):
        storage.delete("bye.txt")


@pytest.mark.parametrize(
    "filename, fmt, expected",
    [
        ("report.txt", FileFormat.CSV, "report.csv"),
        ("report.txt", FileFormat.PDF, "report.pdf"),
        ("notes.md", FileFormat.PDF, "notes.md"),
        ("a.txt.txt", FileFormat.CSV, "a.csv.csv"),
    ],
)
def test_converted_name(filename, fmt, expected):
    assert converted_name(filename, fmt) == expected


def test_metrics_snapshot_is_a_copy():
    store = MetricsStore()
    store.record_upload(10)
    store.record_upload_error()
    store.record_upload_duration(0.5)
    store.record_deletions(0)

    snapshot = store.snapshot()
    snapshot["uploads"] = 99

    current = store.snapshot()
    assert current["uploads"] == 1
    assert current["upload_errors"] == 1
    assert current["bytes_uploaded"] == 10
    assert current["deleted"] == 0
    assert current["upload_seconds_total"] == 0.5


def test_staging_files_are_not_addressable(tmp_path):
    storage = FileStorage(tmp_path)
    staged = storage.stage(b"partial", "file.txt")

    assert not storage.exists(staged.name)
    with pytest.raises(FileMissingError):
        storage.attributes(staged.name)
    with pytest.raises(FileMissingError):
        storage.open_for_download(staged.name)
    with pytest.raises(FileMissingError):
        storage.delete(staged.name)
    assert staged.exists()
