import os
import time
from werkzeug.utils import secure_filename
from utils.constants import ALLOWED_MIME_TYPES


def allowed_mime_type(file_type: str, mimetype: str) -> bool:
    return (mimetype or "").lower() in ALLOWED_MIME_TYPES.get(file_type, [])


def file_size(file_storage) -> int:
    """Size in bytes of an uploaded file; leaves the stream at position 0"""
    stream = file_storage.stream
    stream.seek(0, os.SEEK_END)
    size = stream.tell()
    stream.seek(0)
    return size


def stored_file_name(employee_id, file_type: str, original_name: str) -> str:
    """Unique, filesystem-safe name: <employee>_<type>_<millis>_<original>"""
    stem, ext = os.path.splitext(original_name or "")
    # Stems made only of non-ASCII characters are reduced to nothing
    stem = secure_filename(stem) or "file"
    ext = secure_filename(ext.lstrip(".")).lower()
    clean = f"{stem}.{ext}" if ext else stem
    return f"{employee_id}_{file_type}_{int(time.time() * 1000)}_{clean}"


def save_file(file_storage, uploads_dir: str, subfolder: str, filename: str) -> str:
    folder = os.path.join(uploads_dir, subfolder) if subfolder else uploads_dir
    os.makedirs(folder, exist_ok=True)
    path = os.path.join(folder, filename)
    file_storage.save(path)
    return path
