from setuptools import setup, find_packages
import re

# Read version from paysheet/__init__.py
with open('paysheet/__init__.py') as f:
    version = re.search(r'^__version__ = ["\']([^"\']+)["\']', f.read(), re.MULTILINE).group(1)

setup(
    name='paysheet',
    version=version,
    packages=find_packages(exclude=['tests', 'tests.*']),
    install_requires=[
        'PyPDF2>=3.0.0',
        'PyYAML>=6.0',
        'click>=8.0',
        'rich>=13.0',
        'reportlab>=4.0',
        'openpyxl>=3.1',
        'APScheduler>=3.10,<4',
        'tzdata',
    ],
    extras_require={
        'mcp': [
            'mcp[cli]>=1.0.0,<2',
            'pydantic>=2.0.0',
        ],
        'test': [
            'pytest>=7.0',
            'mcp[cli]>=1.0.0,<2',
            'pydantic>=2.0.0',
        ],
    },
    entry_points={
        'console_scripts': [
            'pay-sheet=paysheet.cli.__main__:main',
            'pay-sheet-mcp=paysheet.mcp.server:run_server',
        ],
    },
    author='Personal',
    description='Semi-monthly timesheet scheduling, rendering and delivery.',
    python_requires='>=3.10',
)
