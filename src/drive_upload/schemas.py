from typing import Optional

from pydantic import BaseModel


class UploadResponse(BaseModel):
    success: bool = True
    fileId: str
    downloadLink: str
    webViewLink: Optional[str] = None
    fileName: str


class ErrorResponse(BaseModel):
    success: bool = False
    error: str
    hint: Optional[str] = None
    details: Optional[str] = None
