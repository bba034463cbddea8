from .progress_record_mapper import ProgressRecordMapper

__all__ = ["ProgressRecordMapper"]
