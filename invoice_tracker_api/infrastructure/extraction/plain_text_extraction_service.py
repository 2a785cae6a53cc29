from shared.utils.exceptions import DocumentExtractionException
from invoice_tracker_api.application.interfaces.service_interfaces import TextExtractionServiceInterface
from invoice_tracker_api.domain.uploaded_file_dto import UploadedFileDTO

TEXT_CONTENT_TYPES = ("text/", "application/json", "application/xml", "application/csv")
TEXT_EXTENSIONS = (".txt", ".csv", ".json", ".xml", ".md")


class PlainTextExtractionService(TextExtractionServiceInterface):
    """Reads text documents as-is. Anything that needs OCR is rejected."""

    def __init__(self, encoding: str = "utf-8"):
        self.encoding = encoding

    def _is_text(self, uploaded_file: UploadedFileDTO) -> bool:
        content_type = (uploaded_file.content_type or "").lower()
        file_name = (uploaded_file.file_name or "").lower()
        return content_type.startswith(TEXT_CONTENT_TYPES) or file_name.endswith(TEXT_EXTENSIONS)

    async def extract_text(self, uploaded_file: UploadedFileDTO) -> str:
        if not self._is_text(uploaded_file):
            raise DocumentExtractionException(
                f"No text extractor for {uploaded_file.file_name} ({uploaded_file.content_type})"
            )
        try:
            return uploaded_file.file_content.decode(self.encoding)
        except UnicodeDecodeError as e:
            raise DocumentExtractionException(
                f"{uploaded_file.file_name} is not valid {self.encoding} text"
            ) from e

    async def close(self) -> None:
        pass
