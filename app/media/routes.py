import logging

from flask import request
from flask.views import MethodView
from flask_login import login_required, current_user
from flask_smorest import Blueprint
from werkzeug.utils import secure_filename

from .errors import MediaUploadError
from .schemas import MediaUploadArgs, MediaUploadResponseSchema
from .services import MediaService

logger = logging.getLogger(__name__)

bp = Blueprint(
    "media", __name__, description="Image upload operations", url_prefix="/media"
)


@bp.route("/upload")
class MediaUpload(MethodView):
    @login_required
    @bp.arguments(MediaUploadArgs, location="form")
    @bp.response(201, MediaUploadResponseSchema)
    @bp.alt_response(400, description="Missing or invalid image")
    def post(self, args):
        """Upload a product cover or avatar image"""
        file = request.files.get("file")
        if file is None or not file.filename:
            raise MediaUploadError("No file provided")

        filename = secure_filename(file.filename) or "upload"
        logger.info(f"User {current_user.id} uploading {filename}")

        url = MediaService.upload_image(file.stream, filename, args["type"])
        return {"url": url}
