"""
Page summary records for the link preview API.

A PageSummary is built fresh for every request by the summary extractor
and serialized straight away. Empty strings, empty lists and zero sizes
mean "not found" and are left out of the JSON shape.
"""

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class PreviewImage:
    """One preview image (or the site icon) discovered in the page head."""

    url: str = ''
    secure_url: str = ''
    type: str = ''
    width: int = 0
    height: int = 0
    alt: str = ''

    def to_dict(self) -> dict:
        """JSON shape of the image, without empty or zero fields."""
        data = {
            'url': self.url,
            'secureURL': self.secure_url,
            'type': self.type,
            'width': self.width,
            'height': self.height,
            'alt': self.alt,
        }
        return {key: value for key, value in data.items() if value}

    def is_empty(self) -> bool:
        return not self.to_dict()


@dataclass
class PageSummary:
    """Summary metadata for a web page."""

    type: str = ''
    url: str = ''
    title: str = ''
    site_name: str = ''
    description: str = ''
    author: str = ''
    keywords: List[str] = field(default_factory=list)
    icon: Optional[PreviewImage] = None
    images: List[PreviewImage] = field(default_factory=list)

    def to_dict(self) -> dict:
        """
        JSON shape of the summary.

        Keys follow the public API (camelCase). Empty fields are omitted,
        and so is an icon with nothing populated.
        """
        data = {
            'type': self.type,
            'url': self.url,
            'title': self.title,
            'siteName': self.site_name,
            'description': self.description,
            'author': self.author,
            'keywords': list(self.keywords),
        }
        result = {key: value for key, value in data.items() if value}

        if self.icon is not None and not self.icon.is_empty():
            result['icon'] = self.icon.to_dict()

        if self.images:
            result['images'] = [image.to_dict() for image in self.images]

        return result
