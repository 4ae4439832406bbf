from setuptools import setup


with open('README.md', 'r', encoding='utf-8') as readme:
    long_description = readme.read()


setup(
    name='matrixgame',
    version='1.0',
    description='Analysis of two-person matrix games: dominance, saddlepoints, Nash equilibria and mixed strategies',
    long_description=long_description,
    long_description_content_type='text/markdown',
    classifiers=[
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: 3.8',
        'Programming Language :: Python :: 3.9',
        'Programming Language :: Python :: 3.10',
        'Programming Language :: Python :: 3.11',
        'Programming Language :: Python :: 3.12',
        'License :: OSI Approved :: MIT License',
        'Operating System :: OS Independent',
        'Topic :: Scientific/Engineering',
        'Topic :: Scientific/Engineering :: Mathematics',
        'Intended Audience :: Science/Research',
    ],
    keywords='game theory, matrix games, zero-sum games, saddlepoint, Nash equilibrium, dominated strategies,'
             ' mixed strategies, oddments',

    packages=['matrixgame', 'matrixgame.symbolic', 'matrixgame.utility'],

    python_requires='>=3.8',
    install_requires=[
        'numpy',
        'pandas',
        'matplotlib',
    ],
    extras_require={
        'symbolic': ['sympy'],
        'test': ['pytest', 'sympy'],
    },

    zip_safe=False,
)
