from shared.config.settings import settings
from shared.infrastructure.document_intelligence_wrapper import DocumentIntelligenceWrapper
from shared.utils.exceptions import DocumentExtractionException
from shared.utils.logging_config import get_logger
from invoice_tracker_api.application.interfaces.service_interfaces import TextExtractionServiceInterface
from invoice_tracker_api.domain.uploaded_file_dto import UploadedFileDTO
from invoice_tracker_api.infrastructure.azure_credential_manager import get_credential_manager

logger = get_logger(__name__)


class DocumentIntelligenceExtractionService(TextExtractionServiceInterface):
    """OCR text extraction backed by Azure Document Intelligence."""

    def __init__(self, wrapper: DocumentIntelligenceWrapper | None = None):
        self.wrapper = wrapper or DocumentIntelligenceWrapper(
            endpoint=settings.document_intelligence_endpoint,
            credential=get_credential_manager().get_credential()
        )

    async def extract_text(self, uploaded_file: UploadedFileDTO) -> str:
        logger.info(
            "Extracting document text",
            extra={"file_name": uploaded_file.file_name, "file_size": uploaded_file.size}
        )
        try:
            return await self.wrapper.read_text(
                uploaded_file.file_content,
                locale=settings.document_intelligence_locale
            )
        except Exception as e:
            raise DocumentExtractionException(
                f"Document Intelligence could not read {uploaded_file.file_name}: {e}"
            ) from e

    async def close(self) -> None:
        await self.wrapper.close()
