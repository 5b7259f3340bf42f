"""
Map Thumbnail & Card Generator Modules
"""

from .batch_thumbnail import generate_batch_thumbnail
from .playlist_thumbnail import generate_playlist_thumbnail
from .card import generate_card
from .reweight_card import generate_reweight_card
from .video_thumbnail import generate_video_thumbnail
from .fetcher import fetch_image_bytes, read_image_as_data_url
from .exporter import Exporter
from .models import BackgroundTransform, DifficultyKey, MapInfo, StarRatings

__all__ = [
    "generate_batch_thumbnail",
    "generate_playlist_thumbnail",
    "generate_card",
    "generate_reweight_card",
    "generate_video_thumbnail",
    "fetch_image_bytes",
    "read_image_as_data_url",
    "Exporter",
    "BackgroundTransform",
    "DifficultyKey",
    "MapInfo",
    "StarRatings",
]
