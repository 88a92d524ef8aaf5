# storefront/repos/course_repo.py
from typing import List

from storefront.data.store import StoreSession
from storefront.domain.schemas import Course

COURSES_KEY = "courses"


class CourseRepo:
    def __init__(self, db: StoreSession):
        self.db = db

    def list_courses(self) -> List[Course]:
        return [Course.model_validate(c) for c in self.db.get(COURSES_KEY, [])]

    def get_course(self, course_id: int) -> Course | None:
        return next((c for c in self.list_courses() if c.id == course_id), None)

    def save_all(self, courses: List[Course]) -> None:
        self.db.set(COURSES_KEY, [c.to_store() for c in courses])

    def save_course(self, course: Course) -> Course:
        courses = self.list_courses()
        for idx, existing in enumerate(courses):
            if existing.id == course.id:
                courses[idx] = course
                break
        else:
            courses.append(course)
        self.save_all(courses)
        return course

    def delete_course(self, course_id: int) -> None:
        self.save_all([c for c in self.list_courses() if c.id != course_id])
