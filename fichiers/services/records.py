from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Session, select

from fichiers.core.errors import DuplicateFilenameError, PersistenceError
from fichiers.models import FileRecord


class FileRecordStore:
    """Metadata rows for uploaded files, looked up by their exact filename."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def find_by_filename(self, filename: str) -> FileRecord | None:
        return self.session.exec(select(FileRecord).where(FileRecord.filename == filename)).first()

    def save(self, record: FileRecord) -> FileRecord:
        self.session.add(record)
        try:
            self.session.commit()
        except IntegrityError as exc:
            self.session.rollback()
            raise DuplicateFilenameError(record.filename) from exc
        except SQLAlchemyError as exc:
            self.session.rollback()
            raise PersistenceError(f"Could not record {record.filename}: {exc}") from exc
        self.session.refresh(record)
        return record

    def delete(self, record: FileRecord) -> None:
        self.session.delete(record)
        try:
            self.session.commit()
        except SQLAlchemyError as exc:
            self.session.rollback()
            raise PersistenceError(f"Could not remove record for {record.filename}: {exc}") from exc
