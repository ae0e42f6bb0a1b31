"""Tests for scroll offset synchronization."""

from browse.scroll import ScrollSync, clamp_offset, target_offset


class TestOffsets:
    """Tests for target_offset and clamp_offset."""

    def test_target_offset(self):
        """Test that the target is index times entry height."""
        assert target_offset(0, 3) == 0
        assert target_offset(5, 3) == 15

    def test_clamp_within_range(self):
        """Test that offsets inside the scroll range are kept."""
        assert clamp_offset(6, content_height=30, viewport_height=10) == 6

    def test_clamp_past_end(self):
        """Test that the offset never scrolls past the content end."""
        assert clamp_offset(27, content_height=30, viewport_height=10) == 20

    def test_clamp_short_content(self):
        """Test that content shorter than the viewport never scrolls."""
        assert clamp_offset(6, content_height=9, viewport_height=20) == 0

    def test_clamp_negative(self):
        """Test that negative offsets clamp to zero."""
        assert clamp_offset(-3, content_height=30, viewport_height=10) == 0


class TestScrollSync:
    """Tests for ScrollSync.offset_for."""

    def test_empty_selection(self):
        """Test that no selection scrolls to the top."""
        assert ScrollSync(entry_height=3).offset_for(None, 0, 10) == 0

    def test_selected_entry_stays_visible(self):
        """Test that the selected entry lies inside the viewport for every index."""
        sync = ScrollSync(entry_height=3)
        entries, viewport = 20, 10
        for index in range(entries):
            offset = sync.offset_for(index, entries, viewport)
            top = index * 3
            assert offset <= top
            assert top + 3 <= offset + viewport
