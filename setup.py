"""
/setup.py

Chat export parsing and event detection.
"""

import setuptools

with open("requirements.txt", "r", encoding="utf-8") as file:
    requirements = [
        line.strip()
        for line in file.read().splitlines()
        if line.strip() and not line.startswith("#")
    ]

setuptools.setup(
    name="chat-events",
    version="0.0.1",
    description="Chat transcript ingestion and event segmentation",
    package_dir={"": "src"},
    packages=setuptools.find_packages(where="src", exclude=["*.tests"]),
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
    python_requires=">=3.10",
    install_requires=requirements,
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "chat-events = chat_events.commands:main",
        ]
    },
)
