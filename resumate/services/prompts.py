"""
Prompt templates for every AI call.

Each builder returns the full user prompt. All prompts end with a strict
JSON output contract; responses still go through response_parser since
models do not always honour it.
"""

from typing import Any, Dict, List, Optional, Sequence

from resumate.schemas.schemas import (
    CandidateProfile,
    JobMatchContext,
    SubjectProfile,
    WeightConfig,
)


def _join(values: Sequence[str], default: str = "None") -> str:
    values = [v for v in values if v]
    return ", ".join(values) if values else default


def _resume_skills(parsed_resume: Dict[str, Any]) -> List[str]:
    skills = parsed_resume.get("skill keyword") or parsed_resume.get("skills") or []
    return skills if isinstance(skills, list) else [str(skills)]


def _resume_list(parsed_resume: Dict[str, Any], *keys: str) -> List[str]:
    for key in keys:
        value = parsed_resume.get(key)
        if isinstance(value, list):
            return [str(v) for v in value]
    return []


# ============================================================
# MATCHING
# ============================================================

def build_alumni_matching_prompt(
    student: SubjectProfile,
    alumni: Sequence[CandidateProfile],
) -> str:
    """Mentor matching: the student is the "resume", each alumni a "JD"."""
    alumni_blocks = "\n".join(
        f"""
Alumni {idx + 1} (ID: {alum.id}):
- Skills: {_join(alum.skills)}
- Experience: {alum.experience or '0 years'}
- Domains of Expertise: {_join(alum.domains)}
- Current Role: {alum.role or 'Not specified'}
- Years of Experience: {alum.total_experience or alum.experience or 'Not specified'}
- Match Keywords: {_join(alum.match_keywords)}"""
        for idx, alum in enumerate(alumni)
    )

    return f"""You are an AI mentor matching system. Compare a student profile with multiple alumni profiles to identify the best mentorship matches.

**Student Profile:**
- Skills: {_join(student.skills)}
- Career Goals: {student.career_goals or 'Not specified'}
- Domain: {student.domain or 'Not specified'}
- Match Keywords: {_join(student.match_keywords)}

**Alumni Profiles:**
{alumni_blocks}

**Evaluation Criteria (Weighted):**
1. Skill Overlap (40%): How many skills match between student and alumni?
2. Domain Overlap (30%): Do the alumni's expertise domains align with student's interests?
3. Career Alignment (20%): Does the alumni's career trajectory match student's goals?
4. Experience Seniority (10%): Does the alumni have sufficient experience to mentor?

**Task:**
For EACH alumni profile, provide:
1. Match score between 0.0 and 1.0 (higher = better match)
2. List of specific reasons why this is a good/poor match
3. Overlapping skills (exact matches only)
4. Overlapping domains (exact matches only)

**Output Format (strict JSON array):**
[
  {{
    "alumniId": "alumni_user_id",
    "matchScore": 0.87,
    "reasons": ["Strong backend skill overlap (Node.js, PostgreSQL)"],
    "skillOverlap": ["node", "react"],
    "domainOverlap": ["backend", "web"]
  }}
]

Return ONLY the JSON array, no additional text. Evaluate every alumni listed."""


def _weights_rubric(weights: WeightConfig) -> str:
    return f"""1. Required Skills Match ({weights.required_weight:g}%): Does student have the required technical skills?
2. Preferred Skills Match ({weights.preferred_weight:g}%): Does student have additional preferred skills?
3. Relevant Experience ({weights.experience_weight:g}%): Projects, internships, and domain knowledge
4. Academic & Career Alignment ({weights.academic_weight:g}%): CGPA and whether career goals align with the role"""


def _student_block(idx: int, student: SubjectProfile) -> str:
    gpa = f"{student.gpa:g}" if student.gpa is not None else "N/A"
    return f"""
Student {idx + 1} (ID: {student.id}):
- Name: {student.name or 'N/A'}
- Skills: {_join(student.skills)}
- CGPA: {gpa}
- Branch: {student.branch or 'N/A'}
- Batch: {student.batch or 'N/A'}
- Domain: {student.domain or 'N/A'}
- Career Goals: {student.career_goals or 'N/A'}
- Experience: {student.total_experience or '0'}
- Projects: {_join(student.projects)}
- Internships: {_join(student.internships)}"""


def build_job_matching_prompt(
    student: SubjectProfile,
    jobs: Sequence[CandidateProfile],
    weights: WeightConfig,
    context: Optional[JobMatchContext] = None,
) -> str:
    """One student against many job postings."""
    job_blocks = "\n".join(
        f"""
Job {idx + 1} (ID: {job.id}):
- Title: {job.role or 'N/A'}
- Description: {job.description or (context.job_description if context else '') or 'N/A'}
- Required Skills: {_join(job.required_skills or (context.required_skills if context else []) or job.skills)}
- Preferred Skills: {_join(job.preferred_skills or (context.preferred_skills if context else []))}
- Domains: {_join(job.domains)}"""
        for idx, job in enumerate(jobs)
    )

    return f"""You are an intelligent job-student matching system. Analyze one student profile against multiple job postings to identify the best-fitting roles.

**Student Profile:**{_student_block(0, student)}

**Job Postings:**
{job_blocks}

**Evaluation Criteria (Weighted):**
{_weights_rubric(weights)}

**Task:**
For EACH job, provide:
1. Match score between 0 and 100 (integer, higher = better fit)
2. List of specific reasons why this job is a good/poor fit
3. Skills that match the job requirements (exact matches only)
4. Critical skills the student is missing for this job

**Output Format (strict JSON array):**
[
  {{
    "jobId": "job_id",
    "matchScore": 87,
    "matchReasons": ["Strong proficiency in required skills: React, Node.js"],
    "skillMatches": ["React", "Node.js"],
    "skillGaps": ["Docker"]
  }}
]

Return ONLY the JSON array. Ensure all jobs are evaluated."""


def build_students_for_job_prompt(
    job_description: str,
    required_skills: Sequence[str],
    preferred_skills: Sequence[str],
    students: Sequence[SubjectProfile],
    weights: WeightConfig,
) -> str:
    """Many students against one job posting."""
    student_blocks = "\n".join(_student_block(idx, s) for idx, s in enumerate(students))

    return f"""You are an intelligent job-student matching system. Analyze multiple student profiles against a job posting to identify the best candidates.

**Job Details:**
Description: {job_description or 'N/A'}
Required Skills: {_join(required_skills)}
Preferred Skills: {_join(preferred_skills)}

**Student Profiles:**
{student_blocks}

**Evaluation Criteria (Weighted):**
{_weights_rubric(weights)}

**Task:**
For EACH student, provide:
1. Match score between 0 and 100 (integer, higher = better fit)
2. List of specific reasons why this student is a good/poor match
3. Skills that match the job requirements (exact matches only)
4. Critical skills the student is missing

**Output Format (strict JSON array):**
[
  {{
    "studentId": "student_user_id",
    "matchScore": 87,
    "matchReasons": ["Relevant project experience in web development"],
    "skillMatches": ["React", "Node.js", "TypeScript"],
    "skillGaps": ["Docker", "Kubernetes"]
  }}
]

Return ONLY the JSON array. Ensure all students are evaluated."""


# ============================================================
# RESUME INTELLIGENCE
# ============================================================

def build_ats_prompt(parsed_resume: Dict[str, Any], target_role: Optional[str] = None) -> str:
    target = f"\n**Target Role:** {target_role}" if target_role else ""
    return f"""You are an ATS (Applicant Tracking System) analyzer. Analyze the following structured resume data and provide insights.

**Parsed Resume Data:**
- Name: {parsed_resume.get('Name') or parsed_resume.get('name') or 'Not specified'}
- Skills: {_join(_resume_skills(parsed_resume))}
- Domain: {parsed_resume.get('Domain') or 'Not specified'}
- Branch: {parsed_resume.get('Branch') or 'Not specified'}
- Experience: {parsed_resume.get('Total year of experience') or '0'} years
- Internships: {_join(_resume_list(parsed_resume, 'Internship', 'internships'))}
- Projects: {_join(_resume_list(parsed_resume, 'Projects', 'projects'))}
- Certificates: {_join(_resume_list(parsed_resume, 'Certificate', 'certificates'))}
- Profile Summary: {parsed_resume.get('Profile Summary') or 'None'}{target}

**Task:**
1. Calculate an ATS score (0-100) based on keyword density, structure, and completeness
2. Identify missing skills or keywords that could improve the score
3. Provide actionable improvement suggestions
4. Highlight strength areas

**Output Format (strict JSON):**
{{
  "atsScore": 75,
  "missingSkills": ["cloud computing", "docker"],
  "improvementSuggestions": ["Add more quantifiable achievements in experience section"],
  "strengthAreas": ["Strong technical skills"]
}}

Return ONLY the JSON object, no additional text."""


def build_resume_jd_prompt(parsed_resume: Dict[str, Any], job_description: str) -> str:
    return f"""Compare this resume with a job description and calculate match quality.

**Resume:**
- Skills: {_join(_resume_skills(parsed_resume))}
- Experience: {parsed_resume.get('Total year of experience') or '0'} years
- Domain: {parsed_resume.get('Domain') or 'Not specified'}
- Projects: {_join(_resume_list(parsed_resume, 'Projects', 'projects'))}

**Job Description:**
{job_description}

**Task:**
Calculate a match score (0.0 to 1.0) and provide specific reasons.

**Output Format (strict JSON):**
{{
  "matchScore": 0.82,
  "reasons": ["Strong skill alignment with required technologies"]
}}

Return ONLY the JSON object."""


def build_keywords_prompt(parsed_resume: Dict[str, Any]) -> str:
    return f"""Extract and enhance keywords from this resume for better job/mentor matching.

**Resume Data:**
- Skills: {_join(_resume_skills(parsed_resume))}
- Domain: {parsed_resume.get('Domain') or 'Not specified'}
- Branch: {parsed_resume.get('Branch') or 'Not specified'}
- Goal: {parsed_resume.get('Goal') or 'Not specified'}
- Projects: {_join(_resume_list(parsed_resume, 'Projects', 'projects'))}
- Internships: {_join(_resume_list(parsed_resume, 'Internship', 'internships'))}
- Profile Summary: {parsed_resume.get('Profile Summary') or 'Not specified'}

**Task:**
1. Identify all technical skills, tools, frameworks, and technologies
2. Extract domain knowledge areas
3. Infer implicit skills from projects and internships
4. Add relevant industry keywords
5. Include career direction keywords

**Output Format (strict JSON):**
{{
  "keywords": ["keyword1", "keyword2", "keyword3"]
}}

Return ONLY the JSON object with a comprehensive list of keywords."""
