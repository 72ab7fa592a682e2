import os

from setuptools import find_packages, setup


def read_readme():
    path = os.path.join(os.path.dirname(__file__), "README.md")
    if not os.path.exists(path):
        return ""
    with open(path, encoding="utf-8") as f:
        return f.read()


setup(
    name="job-publisher",
    version="0.1.0",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    install_requires=[
        "fastapi>=0.100.0",
        "uvicorn>=0.15.0",
        "pydantic>=2.0.0",
        "pydantic-settings>=2.0.0",
        "python-dotenv>=0.19.0",
        "requests>=2.26.0",
        "apscheduler>=3.9.0,<4",
        "psutil>=5.8.0",
        "google-genai>=1.0.0",
        "google-api-python-client>=2.0.0",
        "google-auth>=2.0.0",
        "google-auth-oauthlib>=1.0.0",
        "httplib2>=0.20.0",
        "playwright>=1.40.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0.0",
            "pytest-asyncio>=0.21.0",
            "httpx>=0.24.0",
        ],
    },
    python_requires=">=3.10",
    description="Turns job postings into Blogger articles from the command line or a WhatsApp chat",
    long_description=read_readme(),
    long_description_content_type="text/markdown",
    entry_points={
        "console_scripts": [
            "job-publisher=job_publisher.cli:main",
            "job-publisher-bot=job_publisher.bot.main:main",
            "job-publisher-auth=job_publisher.tools.auth_helper:main",
            "job-publisher-check-key=job_publisher.tools.check_key:main",
        ],
    },
)
