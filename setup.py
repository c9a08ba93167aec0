"""This is the setup file"""

from setuptools import setup, find_packages

with open('README.md', 'r') as r:
    long_description = r.read()

setup(name='modelex',
      version='0.1.0',
      install_requires=[
          'pygments',
      ],
      extras_require={
        'test': ['pytest'],
      },
      python_requires='>=3.8',
      packages=find_packages('src'),
      package_dir={'': 'src'},

      entry_points={
        'pygments.lexers': [
          'modelex-json = modelex.syntax.pygment:JSONLexer',
          'modelex-xml = modelex.syntax.pygment:XMLLexer',
        ],
        'pygments.styles': [
          'modelex = modelex.syntax.pygment:ModelexStyle',
        ],
      },

      author='The modelex developers',
      description='Grammar-driven lexical scanner and syntax highlighter.',
      long_description=long_description,
      long_description_content_type='text/markdown',

      classifiers=[
        'Programming Language :: Python :: 3.8',
        'Programming Language :: Python :: 3.9',
        'Programming Language :: Python :: 3.10',
        'License :: OSI Approved :: BSD License',
        'Operating System :: OS Independent',
        'Development Status :: 4 - Beta',
        'Topic :: Text Processing :: Markup',
      ]
)
