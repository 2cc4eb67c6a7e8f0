from .aligner import AlignedGroup, ImageAligner, RunGroup, align_images, save_aligned_images
from .channels import Channel
from .classifier import extract_group_keys, match_group_files, replicate_prefix
from .profiler import ChannelProfile, ChannelProfiler, ColumnProfileRow, distance_axis
from .validator import ReplicateValidationError, count_replicates, validate_replicates

__all__ = [
    "AlignedGroup",
    "Channel",
    "ChannelProfile",
    "ChannelProfiler",
    "ColumnProfileRow",
    "ImageAligner",
    "ReplicateValidationError",
    "RunGroup",
    "align_images",
    "count_replicates",
    "distance_axis",
    "extract_group_keys",
    "match_group_files",
    "replicate_prefix",
    "save_aligned_images",
    "validate_replicates",
]
