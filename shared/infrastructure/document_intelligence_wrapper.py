"""
Azure Document Intelligence client wrapper for OCR and document text extraction.
"""

from typing import Optional
from azure.ai.documentintelligence.aio import DocumentIntelligenceClient
from azure.ai.documentintelligence.models import AnalyzeDocumentRequest, AnalyzeResult

from shared.utils.logging_config import get_logger

logger = get_logger(__name__)


class DocumentIntelligenceWrapper:
    """
    Wrapper for Azure Document Intelligence (Form Recognizer) operations.
    Reads the full text content of uploaded invoices and receipts.
    """

    def __init__(self, endpoint: str, credential, model_id: str = "prebuilt-read"):
        """
        Initialize Document Intelligence client.

        Args:
            endpoint: Azure Document Intelligence endpoint
            credential: Async Azure credential
            model_id: Analysis model; "prebuilt-read" returns plain OCR text
        """
        self.endpoint = endpoint
        self.model_id = model_id
        self.client: DocumentIntelligenceClient = DocumentIntelligenceClient(
            endpoint=endpoint,
            credential=credential
        )

    async def read_text(self, document_data: bytes, locale: Optional[str] = None) -> str:
        """
        Extract the text content of a document.

        Args:
            document_data: Document bytes (PDF, JPG, PNG, TIFF)
            locale: Optional locale hint, e.g. "en-US"
        Returns:
            Text content, lines separated by newlines
        """
        try:
            analyze_request = AnalyzeDocumentRequest(bytes_source=document_data)
            kwargs = {"locale": locale} if locale else {}
            poller = await self.client.begin_analyze_document(
                model_id=self.model_id,
                body=analyze_request,
                **kwargs
            )
            result: AnalyzeResult = await poller.result()
            return self._extract_content(result)
        except Exception as e:
            logger.error(f"Failed to read document text: {e}")
            raise

    def _extract_content(self, result: AnalyzeResult) -> str:
        if result.content:
            return result.content

        lines = []
        for page in result.pages or []:
            for line in page.lines or []:
                lines.append(line.content)
        return "\n".join(lines)

    async def close(self) -> None:
        await self.client.close()
