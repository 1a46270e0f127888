from gymdesk.staff.models.staff import Staff, StaffRole

__all__ = ["Staff", "StaffRole"]
