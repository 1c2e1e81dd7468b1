# server/core/media.py

import os
import tempfile
import uuid
from pathlib import Path, PurePosixPath
from core.config import IMAGE_EXTENSIONS, MEDIA_URL_PREFIX
from core.errors import ValidationError


class MediaStore:
    """
    Flat directory of uploaded files, addressed by generated storage keys.
    Whether a key's file exists here is the only truth about the file.
    """

    def __init__(self, root: Path | str):
        self.root = Path(root)
        os.makedirs(self.root, exist_ok=True)

    @staticmethod
    def generate_key(original_name: str | None, mime_type: str | None = None) -> str:
        """
        Returns a fresh collision-free key.

        The original name's lowercased extension is kept only if it is an
        image extension agreeing with `mime_type`; otherwise the extension
        implied by `mime_type` is used. Without a type, any image extension
        is kept and anything else dropped.
        """
        ext = ""
        if original_name:
            ext = PurePosixPath(original_name.replace("\\", "/")).suffix.lower()

        if mime_type in IMAGE_EXTENSIONS:
            allowed = IMAGE_EXTENSIONS[mime_type]
            suffix = ext if ext in allowed else allowed[0]
        else:
            known = {e for exts in IMAGE_EXTENSIONS.values() for e in exts}
            suffix = ext if ext in known else ""
        return f"{uuid.uuid4().hex}{suffix}"

    def path_for(self, key: str) -> Path:
        if not key or key in (".", "..") or "/" in key or "\\" in key or "\x00" in key:
            raise ValidationError(f"Invalid storage key: {key!r}")
        return self.root / key

    def url_for(self, key: str) -> str:
        return f"{MEDIA_URL_PREFIX}/{key}"

    def save(self, key: str, data: bytes) -> Path:
        path = self.path_for(key)
        fd, tmp_name = tempfile.mkstemp(dir=self.root, prefix=".upload-")
        try:
            with os.fdopen(fd, "wb") as buffer:
                buffer.write(data)
            os.replace(tmp_name, path)
        except BaseException:
            if os.path.exists(tmp_name):
                os.remove(tmp_name)
            raise
        return path

    def exists(self, key: str) -> bool:
        return self.path_for(key).is_file()

    def remove(self, key: str) -> bool:
        try:
            os.remove(self.path_for(key))
        except FileNotFoundError:
            return False
        return True
