from .detector import Occurrence, detect_hardcoded_text_in_html, detect_hardcoded_text_in_ts
from .processor import ProcessReport, process_hardcoded_text

__all__ = [
    "Occurrence",
    "ProcessReport",
    "detect_hardcoded_text_in_html",
    "detect_hardcoded_text_in_ts",
    "process_hardcoded_text",
]
