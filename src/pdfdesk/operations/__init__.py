"""Document operation drivers, one function per feature."""

from pdfdesk.operations.compose import create_note_pdf, images_to_pdf, text_files_to_pdf
from pdfdesk.operations.convert import compress_pdf, pdf_to_images
from pdfdesk.operations.edit import add_page_numbers, add_watermark, delete_pages, extract_pages, rotate_pages
from pdfdesk.operations.organize import merge_pdfs, reorder_pages, split_pdf
from pdfdesk.operations.secure import RedactionWorkspace, strip_metadata

__all__ = [
    "RedactionWorkspace",
    "add_page_numbers",
    "add_watermark",
    "compress_pdf",
    "create_note_pdf",
    "delete_pages",
    "extract_pages",
    "images_to_pdf",
    "merge_pdfs",
    "pdf_to_images",
    "reorder_pages",
    "rotate_pages",
    "split_pdf",
    "strip_metadata",
    "text_files_to_pdf",
]
