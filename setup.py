"""
setup.py - Package Installation Configuration
==============================================
"""

from setuptools import setup
from pathlib import Path

# Read README for long description
readme_file = Path(__file__).parent / "README.md"
if readme_file.exists():
    long_description = readme_file.read_text()
else:
    long_description = "Efficient Subwindow Search: branch & bound localization of the best rectangle in a weight map"

requirements = [
    'numpy>=1.21.0',
    'opencv-python>=4.5.0',
]

setup(
    name='ess-search',
    version='1.0.0',
    author='Subwindow Search Team',
    description='Branch & bound search for the highest-scoring rectangle in a 2D weight map',
    long_description=long_description,
    long_description_content_type='text/markdown',
    py_modules=[
        'config',
        'models',
        'utils',
        'ess_state',
        'ess_bounds',
        'ess_queue',
        'ess_progress',
        'ess_search',
        'ess_visualizer',
        'main',
    ],
    classifiers=[
        'Development Status :: 4 - Beta',
        'Intended Audience :: Developers',
        'Intended Audience :: Science/Research',
        'Topic :: Scientific/Engineering :: Image Recognition',
        'License :: OSI Approved :: Apache Software License',
        'Programming Language :: Python :: 3',
        'Operating System :: OS Independent',
    ],
    python_requires='>=3.8',
    install_requires=requirements,
    extras_require={
        'dev': [
            'pytest>=6.2.0',
            'black>=21.6b0',
            'flake8>=3.9.0',
            'mypy>=0.910',
            'coverage>=5.5',
        ],
        'yaml': [
            'PyYAML>=5.4',
        ],
    },
    entry_points={
        'console_scripts': [
            'ess-search=main:main',
        ],
    },
    zip_safe=False,
)
