"""
Default lookup tables used by the extractors, the ATS analyzer and the
suggestion generator. They are copied into ``Vocabulary`` settings objects,
so callers can override any table without touching scoring code.
"""

VOCABULARY_VERSION = "1.0"

# Canonical section -> heading synonyms. Order matters: first synonym that
# matches a heading wins.
SECTION_SYNONYMS = {
    "summary": [
        "summary", "professional summary", "objective", "career objective",
        "profile", "professional profile", "personal statement", "about me",
    ],
    "experience": [
        "experience", "employment", "work history", "professional experience",
        "career history", "work experience", "employment history",
    ],
    "education": [
        "education", "academic background", "qualifications", "academic qualifications",
    ],
    "skills": [
        "skills", "technical skills", "core competencies", "technologies",
        "programming languages", "tools", "software", "expertise",
    ],
    "certifications": [
        "certifications", "certificates", "licenses", "licenses and certifications",
    ],
    "projects": [
        "projects", "personal projects", "side projects", "portfolio",
        "notable projects", "key projects",
    ],
    "awards": [
        "awards", "honors", "achievements", "recognitions", "accolades",
    ],
    "publications": [
        "publications", "papers", "research", "articles", "journals",
    ],
    "volunteering": [
        "volunteer", "volunteering", "community service", "volunteer experience",
        "community involvement", "social work",
    ],
    "languages": [
        "languages", "spoken languages", "language skills",
    ],
}

# Headings that end a section without being extracted themselves
EXTRA_SECTION_HEADINGS = ["references", "contact", "interests", "hobbies"]

TECHNICAL_SKILLS = [
    # Programming languages
    "JavaScript", "Python", "Java", "C++", "C#", "PHP", "Ruby", "Go", "Rust", "Swift", "Kotlin",
    "TypeScript", "Scala", "R", "MATLAB", "Perl", "Shell", "Bash",
    # Web technologies
    "HTML", "CSS", "React", "Angular", "Vue", "Node.js", "Express", "Django", "Flask",
    "Spring", "Laravel", "Rails", "ASP.NET", "jQuery", "Bootstrap", "Sass", "Less",
    # Databases
    "MySQL", "PostgreSQL", "MongoDB", "Redis", "SQLite", "Oracle", "SQL Server",
    "Cassandra", "DynamoDB", "Elasticsearch", "SQL",
    # Cloud & DevOps
    "AWS", "Azure", "Google Cloud", "Docker", "Kubernetes", "Jenkins", "Git", "GitHub",
    "GitLab", "CI/CD", "Terraform", "Ansible", "Chef", "Puppet",
    # Data & Analytics
    "Pandas", "NumPy", "TensorFlow", "PyTorch", "Scikit-learn", "Tableau", "Power BI",
    "Apache Spark", "Hadoop", "Kafka", "Airflow",
]

SOFT_SKILLS = [
    "Leadership", "Communication", "Teamwork", "Collaboration", "Problem Solving",
    "Problem-Solving", "Critical Thinking", "Adaptability", "Time Management",
    "Project Management", "Mentoring", "Negotiation", "Creativity",
]

SPOKEN_LANGUAGES = [
    "English", "Spanish", "French", "German", "Italian", "Portuguese", "Mandarin",
    "Chinese", "Japanese", "Korean", "Hindi", "Arabic", "Russian", "Dutch",
]

LANGUAGE_PROFICIENCIES = [
    "native", "fluent", "bilingual", "professional", "conversational",
    "intermediate", "basic", "beginner", "advanced",
]

CERTIFICATION_ISSUERS = [
    "AWS", "Azure", "Google", "Microsoft", "Oracle", "Cisco", "CompTIA",
]

# ATS keyword analyzer: presence of each term is worth a fixed bonus
IMPORTANT_KEYWORDS = [
    # General professional keywords
    "experience", "skills", "management", "leadership", "team", "project",
    "development", "analysis", "problem-solving", "communication",
    # Action verbs
    "managed", "led", "developed", "implemented", "created", "designed",
    "analyzed", "improved", "optimized", "coordinated", "collaborated",
    # Quantifiable achievements
    "increased", "decreased", "reduced", "achieved", "exceeded",
    "delivered", "completed", "successful",
]

ACTION_VERBS = [
    "achieved", "administered", "analyzed", "collaborated", "created", "developed",
    "established", "evaluated", "implemented", "improved", "increased", "led",
    "managed", "optimized", "organized", "reduced", "resolved", "supervised",
]

WEAK_VERBS = ["did", "made", "got", "worked", "helped", "was responsible for"]

TECH_KEYWORDS = [
    "agile", "scrum", "devops", "ci/cd", "api", "microservices", "cloud",
    "machine learning", "artificial intelligence", "data analysis", "automation",
]

SOFT_SKILL_KEYWORDS = [
    "leadership", "communication", "problem-solving", "teamwork", "collaboration",
    "critical thinking", "adaptability", "time management", "project management",
]

BUZZWORDS = [
    "innovative", "strategic", "results-driven", "customer-focused", "detail-oriented",
]

INFORMAL_WORDS = [
    "awesome", "cool", "stuff", "things", "lots of", "a lot", "pretty good",
    "really", "very", "totally", "super", "amazing",
]

# misspelling -> correction
MISSPELLINGS = {
    "teh": "the",
    "recieve": "receive",
    "managment": "management",
    "occured": "occurred",
    "seperate": "separate",
}
