from setuptools import setup, find_packages

setup(
    name="folder-audit-tools",
    version="1.0.0",
    description="Folder digest exporter and file-name auditor for administrators",
    author="Ashwin Nair",
    packages=find_packages(include=["apps", "apps.*", "audit", "audit.*", "common", "common.*"]),
    python_requires=">=3.8",
    install_requires=[
        "argcomplete",
        "PyYAML",
        "rich",
        "tqdm",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "file-digest = apps.cli:cli_file_digest",
            "name-audit = apps.cli:cli_name_audit",
            "folder-audit-config = common.shared.loader:cli_main",
        ],
    },
)
