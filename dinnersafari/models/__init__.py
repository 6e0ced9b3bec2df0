from .event import Event
from .match_plan import MatchPlan
from .couple import Couple
from .envelope import Envelope, COURSES, AFTERPARTY
from .course_clue import CourseClue
from .street_info import StreetInfo
