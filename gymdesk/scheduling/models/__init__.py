from gymdesk.scheduling.models.class_session import ClassPackage, ClassSession, ClassType

__all__ = ["ClassPackage", "ClassSession", "ClassType"]
