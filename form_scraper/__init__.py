"""Form Scraper.

Turns uploaded government form documents (scanned images, PDFs and Word
files) into structured form definitions: typed fields, sections and the
supporting documents an applicant must attach. Combines Tesseract OCR,
OpenCV preprocessing and rule-based field inference.
"""

__version__ = "0.1.0"
