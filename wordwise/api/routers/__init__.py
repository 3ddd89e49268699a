from . import student_router, teacher_router, words_router

__all__ = ["student_router", "teacher_router", "words_router"]
