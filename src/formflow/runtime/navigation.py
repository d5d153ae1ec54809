"""
App shell collaborators: navigation items and the drawer toggle.

Neither is coupled to validation or derived values.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

DRAWER_COOKIE = "ff-drawer"


class NavItem(BaseModel):
    path: str
    label: str

    model_config = ConfigDict(frozen=True)


NAV_ITEMS: list[NavItem] = [
    NavItem(path="/applicant-details", label="Applicant details form"),
    NavItem(path="/home-loan-calculator", label="Home Loan Calculator"),
    NavItem(path="/home-loan-enquiry", label="Home Loan Enquiry"),
]


def get_nav_item_by_path(path: str | None) -> NavItem | None:
    """The nav item registered for ``path``, if any."""
    for item in NAV_ITEMS:
        if item.path == path:
            return item
    return None


class DrawerState(BaseModel):
    """Open/closed state of the navigation drawer."""

    open: bool = False

    def toggle(self) -> DrawerState:
        return DrawerState(open=not self.open)

    @classmethod
    def from_cookie(cls, raw: str | None) -> DrawerState:
        return cls(open=raw == "1")

    def to_cookie(self) -> str:
        return "1" if self.open else "0"
