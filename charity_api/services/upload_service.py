import os
import uuid
from typing import Any, Dict

from flask import current_app
from werkzeug.datastructures import FileStorage
from werkzeug.utils import secure_filename

from charity_api.utils.errors import ApiError, ValidationError
from charity_api.utils.upload_validators import (
    image_extension,
    validate_image,
    validate_size,
)


def _size(file: FileStorage) -> int:
    stream = file.stream
    stream.seek(0, os.SEEK_END)
    size = stream.tell()
    stream.seek(0)
    return size


def save_image(file: FileStorage | None) -> Dict[str, Any]:
    if file is None or not file.filename:
        raise ValidationError("No image file provided")

    ok, err = validate_image(file.filename, file.mimetype)
    if not ok:
        raise ValidationError(err)

    size = _size(file)
    ok, err = validate_size(size, current_app.config["MAX_UPLOAD_BYTES"])
    if not ok:
        raise ApiError(err, 413 if size > 0 else 400)

    folder = current_app.config["UPLOAD_FOLDER"]
    os.makedirs(folder, exist_ok=True)
    stored = f"{uuid.uuid4().hex}{image_extension(file.filename)}"
    file.save(os.path.join(folder, stored))
    current_app.logger.info("upload: stored %s (%d bytes)", stored, size)

    return {
        "filename": stored,
        "originalName": secure_filename(file.filename) or file.filename,
        "size": size,
        "url": f"/uploads/{stored}",
    }
