from .review_record_mapper import ReviewRecordMapper
from .struggling_entry_mapper import StrugglingEntryMapper

__all__ = ["ReviewRecordMapper", "StrugglingEntryMapper"]
