"""Tests for affirm.equivalency.members."""

from affirm.equivalency import MemberKind, SelectedMemberInfo, find_member, members_of


class Widget:
    def __init__(self, size):
        self._size = size

    @property
    def size(self) -> "UndefinedSize":
        return self._size


def test_unresolvable_property_annotation_is_undeclared():
    assert members_of(Widget) == [SelectedMemberInfo("size", None, MemberKind.PROPERTY, Widget)]


def test_find_member_reads_instance_attributes():
    class Settings:
        def __init__(self):
            self.retries = 3
            self._secret = "x"

    settings = Settings()

    assert find_member(settings, "retries").get_value(settings) == 3
    assert find_member(settings, "_secret") is None
