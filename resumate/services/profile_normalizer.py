"""
Profile Normalizer - stored records -> canonical matching profiles.

Records reach the matcher in several shapes:
- student profiles (camelCase keys written by the frontend)
- n8n parsed resumes ("skill keyword", "CGPA", "Projects", ...)
- alumni directory rows (skills as one comma separated string)
- alumni mentor profiles (domainsOfExpertise, currentRole, ...)
- job postings (requiredSkills, preferredSkills, ...)

Only the identifier is mandatory. Missing lists become [], missing
text becomes "".
"""

import re
from typing import Any, Iterable, List, Optional

from resumate.core.exceptions import InvalidProfile
from resumate.schemas.schemas import CandidateProfile, MatchMode, SubjectProfile


SUBJECT_ID_KEYS = ("userId", "user_id", "UseID", "studentId", "student_id", "id", "_id")
CANDIDATE_ID_KEYS = ("userId", "user_id", "alumniId", "jobId", "job_id", "studentId", "id", "_id")

_SKILL_SEPARATORS = re.compile(r"[,;|\n]")


def _first(record: dict, *keys: str, default: Any = None) -> Any:
    """Value of the first key present with a non-empty value."""
    for key in keys:
        value = record.get(key)
        if value is not None and value != "" and value != []:
            return value
    return default


def _text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        return ", ".join(str(v).strip() for v in value if v is not None and str(v).strip())
    return str(value).strip()


def _string_list(value: Any) -> List[str]:
    """
    Coerce a list-ish field to a list of stripped strings.
    Strings are split on commas, semicolons, pipes and newlines.
    """
    if value is None:
        return []
    if isinstance(value, str):
        items: Iterable[Any] = _SKILL_SEPARATORS.split(value)
    elif isinstance(value, (list, tuple, set)):
        items = value
    else:
        items = [value]

    result = []
    for item in items:
        if item is None:
            continue
        item = str(item).strip()
        if item:
            result.append(item)
    return result


def _identifier(record: dict, keys: Iterable[str]) -> str:
    value = _first(record, *keys)
    if value is None or not str(value).strip():
        raise InvalidProfile("Profile record has no identifier")
    return str(value).strip()


def parse_gpa(value: Any) -> Optional[float]:
    """Parse a GPA/CGPA value. Unparseable input gives None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    match = re.search(r"\d+(?:\.\d+)?", str(value))
    if not match:
        return None
    return float(match.group(0))


def normalize_subject(record: dict) -> SubjectProfile:
    """
    Build a SubjectProfile from a student profile or parsed resume.

    Raises:
        InvalidProfile if the record has no identifier
    """
    if not isinstance(record, dict):
        raise InvalidProfile("Profile record must be a mapping")

    return SubjectProfile(
        id=_identifier(record, SUBJECT_ID_KEYS),
        skills=_string_list(_first(record, "skills", "skill keyword", "skill_keywords")),
        career_goals=_text(_first(record, "careerGoals", "career_goals", "Goal", "goal")),
        domain=_text(_first(record, "domain", "Domain")),
        gpa=parse_gpa(_first(record, "cgpa", "CGPA", "gpa")),
        projects=_string_list(_first(record, "projects", "Projects")),
        internships=_string_list(_first(record, "internships", "Internship", "internship")),
        name=_text(_first(record, "name", "Name")),
        branch=_text(_first(record, "branch", "Branch")),
        batch=_text(_first(record, "batch", "Batch")),
        total_experience=_text(_first(
            record, "totalExperience", "total_experience", "Total year of experience"
        )),
        match_keywords=_string_list(_first(record, "matchKeywords", "match_keywords")),
    )


def normalize_candidate(record: dict, mode: MatchMode) -> CandidateProfile:
    """
    Build a CandidateProfile from an alumni or job record.

    In alumni mode, directory rows keep their skills in one string and
    nested course/batch objects; both are flattened here.

    Raises:
        InvalidProfile if the record has no identifier
    """
    if not isinstance(record, dict):
        raise InvalidProfile("Profile record must be a mapping")

    candidate_id = _identifier(record, CANDIDATE_ID_KEYS)

    if mode is MatchMode.alumni_mentor:
        course = record.get("course")
        domains = _string_list(_first(record, "domainsOfExpertise", "domains", "domain"))
        if not domains and isinstance(course, dict) and course.get("name"):
            domains = [str(course["name"]).strip()]
        return CandidateProfile(
            id=candidate_id,
            skills=_string_list(record.get("skills")),
            role=_text(_first(record, "currentRole", "current_role", "role")),
            description=_text(_first(record, "about", "bio", "description", "higherEducation")),
            domains=domains,
            experience=_text(record.get("experience")),
            total_experience=_text(_first(record, "totalExperience", "total_experience")),
            match_keywords=_string_list(_first(record, "matchKeywords", "match_keywords")),
        )

    return CandidateProfile(
        id=candidate_id,
        skills=_string_list(_first(record, "skills", "skill keyword", "keywords")),
        required_skills=_string_list(_first(record, "requiredSkills", "required_skills")),
        preferred_skills=_string_list(_first(record, "preferredSkills", "preferred_skills")),
        role=_text(_first(record, "title", "role", "currentRole")),
        description=_text(_first(record, "description", "jobDescription")),
        domains=_string_list(_first(record, "domains", "domain", "Domain")),
        experience=_text(_first(record, "experience", "totalExperience")),
        total_experience=_text(_first(record, "totalExperience", "Total year of experience")),
        match_keywords=_string_list(_first(record, "matchKeywords", "match_keywords")),
    )


def flatten_student_document(doc: dict) -> dict:
    """
    Merge a stored student profile with its n8n parsed resume.
    Profile fields win over resume fields of the same meaning.
    """
    record = dict(doc.get("parsedResume") or {})
    record.update({k: v for k, v in doc.items() if k != "parsedResume"})
    return record
