import os
import tempfile
from pathlib import Path

import pytest

# Must be set before database / ats_score_service are imported
_TMP_DIR = tempfile.mkdtemp(prefix="resumescore-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{Path(_TMP_DIR) / 'test.db'}"
os.environ["RS_API_KEY"] = "test-key"
os.environ.pop("AI_SUGGESTIONS_URL", None)


TECH_RESUME = """JANE DOE
jane.doe@gmail.com | (555) 123-4567 | linkedin.com/in/janedoe | Austin, TX

SUMMARY
Software engineer with 6 years of experience building web applications in Python and JavaScript.
Passionate about clean code, reliable systems and mentoring engineers on modern cloud practices.

EXPERIENCE
Senior Software Engineer, Acme Corp, 2019 - 2024
• Led a team of 5 engineers building a React and Node platform used by 40,000 customers
• Improved API latency by 35% using caching with Redis and PostgreSQL query tuning
• Developed CI/CD pipelines with Jenkins and Docker, reducing release time by 50%
• Collaborated with product managers and presented architecture proposals to stakeholders

Software Engineer, Beta Labs, 2016 - 2019
• Built microservices in Python with Docker and Kubernetes on AWS
• Implemented automated testing that increased coverage from 40% to 85%

EDUCATION
B.S. Computer Science, State University, 2016

SKILLS
Programming Languages: Python, JavaScript, TypeScript, Java
Frameworks: React, Node.js, Django
Databases: PostgreSQL, MongoDB, Redis
Tools: Git, GitHub, Docker, Kubernetes, AWS
Soft skills: communication, leadership, teamwork

PROJECTS
• Open source contributor on GitHub: portfolio at github.com/janedoe
"""

BARE_RESUME = """John Smith
Worked on some things at a company for a while.
Did stuff with computers and helped people.
"""


@pytest.fixture
def tech_resume():
    return TECH_RESUME


@pytest.fixture
def bare_resume():
    return BARE_RESUME


def words(n, word="analysis"):
    """Text of exactly n whitespace-separated words."""
    return " ".join([word] * n)


@pytest.fixture
def make_words():
    return words
