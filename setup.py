from setuptools import setup, find_packages

setup(
    name="weather-lookup",
    version="1.0.0",
    author="Onehand Coding",
    author_email="onehand.coding433@gmail.com",
    description="Current weather and a 5-day forecast for any city, in the terminal",
    long_description=open("README.md", encoding="utf-8").read(),
    long_description_content_type="text/markdown",
    package_dir={"": "src"},
    packages=find_packages(where="src"),  # Finds weather_lookup and its subpackages
    install_requires=[
        "tzdata",
        "geopy",
        "requests",
        "python-dotenv",
        "typer",
        "rich",
    ],  # Dependencies
    extras_require={
        "test": ["pytest"],
    },
    python_requires=">=3.9",  # zoneinfo
    entry_points={
        "console_scripts": [
            "weather-lookup=weather_lookup.__main__:main",  # CLI command.
        ]
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
)
