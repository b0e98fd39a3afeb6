"""
Unit tests for the PageSummary / PreviewImage JSON shape.
"""

from shared.summary_models import PageSummary, PreviewImage


class TestPreviewImageToDict:
    """Tests for PreviewImage.to_dict()"""

    def test_empty_image(self):
        assert PreviewImage().to_dict() == {}
        assert PreviewImage().is_empty()

    def test_zero_sizes_omitted(self):
        image = PreviewImage(url="https://a.com/i.png", width=0, height=0)
        assert image.to_dict() == {'url': "https://a.com/i.png"}

    def test_all_fields(self):
        image = PreviewImage(
            url="http://a.com/i.png",
            secure_url="https://a.com/i.png",
            type="image/png",
            width=640,
            height=480,
            alt="Cover",
        )
        assert image.to_dict() == {
            'url': "http://a.com/i.png",
            'secureURL': "https://a.com/i.png",
            'type': "image/png",
            'width': 640,
            'height': 480,
            'alt': "Cover",
        }


class TestPageSummaryToDict:
    """Tests for PageSummary.to_dict()"""

    def test_empty_summary(self):
        assert PageSummary().to_dict() == {}

    def test_camel_case_keys(self):
        summary = PageSummary(site_name="Example", title="T")
        assert summary.to_dict() == {'siteName': "Example", 'title': "T"}

    def test_keywords_kept_in_order(self):
        summary = PageSummary(keywords=["b", "a"])
        assert summary.to_dict() == {'keywords': ["b", "a"]}

    def test_empty_icon_omitted(self):
        assert 'icon' not in PageSummary(icon=PreviewImage()).to_dict()

    def test_icon_included(self):
        summary = PageSummary(icon=PreviewImage(url="https://a.com/favicon.ico"))
        assert summary.to_dict() == {'icon': {'url': "https://a.com/favicon.ico"}}

    def test_images_in_order(self):
        summary = PageSummary(images=[PreviewImage(url="1"), PreviewImage(url="2")])
        assert summary.to_dict() == {'images': [{'url': "1"}, {'url': "2"}]}

    def test_fresh_lists_per_instance(self):
        first = PageSummary()
        first.images.append(PreviewImage(url="x"))
        assert PageSummary().images == []
