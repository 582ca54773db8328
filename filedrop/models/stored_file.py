from datetime import datetime, timezone
from typing import Optional

class StoredFile:
    def __init__(
        self,
        filename: str,
        path: str,
        size: int,
        mimetype: str,
        fieldname: str = "file",
        original_filename: Optional[str] = None,
        stored_at: Optional[datetime] = None,
    ):
        self.filename = filename
        self.path = path
        self.size = size
        self.mimetype = mimetype
        self.fieldname = fieldname
        self.original_filename = original_filename
        self.stored_at = stored_at or datetime.now(timezone.utc)

    def to_dict(self):
        return {
            "filename": self.filename,
            "path": self.path,
            "size": self.size,
            "mimetype": self.mimetype,
        }

    def __repr__(self):
        return f"StoredFile(filename={self.filename!r}, size={self.size})"
