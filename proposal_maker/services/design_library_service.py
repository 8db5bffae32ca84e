"""Design library creation from an uploaded screenshot.

Creation is all-or-nothing: the row is only inserted after the model
service has answered and its answer has been normalised, so a failed call
never leaves a partial library behind.
"""
import base64
import binascii
import logging
import math
from io import BytesIO
from typing import Callable, List, Optional, Tuple

from PIL import Image as PILImage
from PIL import UnidentifiedImageError
from sqlalchemy.orm import Session

from proposal_maker.config.settings import get_settings
from proposal_maker.database.models import Account, DesignLibrary
from proposal_maker.services.credential_service import build_client
from proposal_maker.services.llm_client import ChatCompletionsClient
from proposal_maker.services.response_parser import ResponseShape, normalize
from proposal_maker.services.template_resolver import TemplateResolver
from proposal_maker.utils.error_handling import ResourceNotFoundError, ValidationError

logger = logging.getLogger(__name__)

MIN_IMAGE_BASE64_CHARS = 100
_DEFAULT_MIME_TYPE = "image/jpeg"


def strip_data_url(image_base64: str) -> str:
    """Drop a ``data:<mime>;base64,`` prefix if the client sent a data URL."""
    if image_base64.startswith("data:") and "," in image_base64:
        return image_base64.split(",", 1)[1]
    return image_base64


def estimate_decoded_size(image_base64: str) -> int:
    return math.ceil(len(image_base64) * 3 / 4)


def validate_image(image_base64: str, max_bytes: Optional[int] = None) -> Tuple[str, str]:
    """Check an uploaded base64 image before it is sent to the model service.

    Returns:
        Tuple of (base64 payload without data-URL prefix, mime type)

    Raises:
        ValidationError: If the payload is too short, too large, not base64
            or not an image Pillow can identify.
    """
    max_bytes = max_bytes if max_bytes is not None else get_settings().max_image_bytes
    payload = strip_data_url((image_base64 or "").strip())

    if len(payload) < MIN_IMAGE_BASE64_CHARS:
        raise ValidationError("Invalid image data")

    if estimate_decoded_size(payload) > max_bytes:
        raise ValidationError(
            f"Image too large. Maximum size is {max_bytes // (1024 * 1024)}MB",
            details={"max_bytes": max_bytes},
        )

    try:
        raw = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ValidationError("Invalid image data") from e

    try:
        with PILImage.open(BytesIO(raw)) as img:
            img.verify()
            image_format = img.format
    except (UnidentifiedImageError, OSError, SyntaxError) as e:
        raise ValidationError("Uploaded data is not a supported image") from e

    mime_type = PILImage.MIME.get(image_format or "", _DEFAULT_MIME_TYPE)
    return payload, mime_type


class DesignLibraryService:
    """CRUD for an account's design libraries."""

    def __init__(
        self,
        db: Session,
        account: Account,
        client_factory: Optional[Callable[[Session, Account], ChatCompletionsClient]] = None,
    ):
        self.db = db
        self.account = account
        self.client_factory = client_factory or build_client

    def list_libraries(self) -> List[DesignLibrary]:
        return (
            self.db.query(DesignLibrary)
            .filter(DesignLibrary.created_by == self.account.id)
            .order_by(DesignLibrary.created_at.desc(), DesignLibrary.id.desc())
            .all()
        )

    def get_library(self, library_id: int) -> DesignLibrary:
        library = (
            self.db.query(DesignLibrary)
            .filter(DesignLibrary.id == library_id, DesignLibrary.created_by == self.account.id)
            .first()
        )
        if library is None:
            raise ResourceNotFoundError("Design library not found", details={"design_library_id": library_id})
        return library

    def create_library(
        self,
        name: str,
        description: str,
        image_base64: str,
        prompt_template_id: int,
    ) -> DesignLibrary:
        """Analyse a screenshot with the vision model and store the tokens.

        Raises:
            ValidationError: Missing fields or unusable image.
            TemplateNotFound: Template missing or inactive.
            CredentialMissing: No stored API key.
            UpstreamError / EmptyCompletion: Model service failure.
            MalformedModelOutput / SchemaViolation / EmptyResult: Unusable answer.
        """
        name = (name or "").strip()
        description = (description or "").strip()
        if not name or not description or not image_base64 or prompt_template_id is None:
            raise ValidationError("Name, description, image, and prompt template are required")

        template = TemplateResolver(self.db).get_active_template(prompt_template_id)
        client = self.client_factory(self.db, self.account)
        payload, mime_type = validate_image(image_base64)

        raw = client.complete_with_image(template.prompt, payload, mime_type=mime_type)
        tokens = normalize(raw, ResponseShape.DESIGN_TOKENS)

        library = DesignLibrary(
            name=name,
            description=description,
            css_variables=tokens.css_variables,
            analysis_result=tokens.analysis_result,
            prompt_template_id=template.id,
            created_by=self.account.id,
        )
        self.db.add(library)
        self.db.commit()
        self.db.refresh(library)

        logger.info(f"Created design library: {library.name} (id={library.id})")
        return library

    def update_library(self, library_id: int, name: Optional[str] = None, description: Optional[str] = None) -> DesignLibrary:
        """Rename or redescribe a library. Tokens are immutable."""
        library = self.get_library(library_id)
        if name:
            library.name = name.strip()
        if description:
            library.description = description.strip()
        self.db.commit()
        self.db.refresh(library)
        logger.info(f"Updated design library: {library.name} (id={library.id})")
        return library

    def delete_library(self, library_id: int) -> None:
        library = self.get_library(library_id)
        self.db.delete(library)
        self.db.commit()
        logger.info(f"Deleted design library: {library.name} (id={library_id})")
