from setuptools import setup, find_packages

import okta_saml

with open('requirements.txt') as f:
    requirements = f.read().splitlines()

setup(
    name='okta-saml',
    version=okta_saml.version,
    install_requires=requirements,
    extras_require={
        'test': ['pytest>=7.0', 'responses>=0.23.0'],
    },
    description="A CLI to get a SAML assertion from Okta, with SMS, TOTP and Duo MFA",
    long_description=open("LONG_DESCRIPTION.md").read(),
    long_description_content_type='text/markdown',
    python_requires=">=3.7",
    license='Apache License, v2.0',
    packages=find_packages(exclude=('tests', 'docs')),
    test_suite="tests",
    scripts=['bin/okta-saml'],
    classifiers=[
        'Natural Language :: English',
        'Programming Language :: Python :: 3 :: Only',
        'License :: OSI Approved :: Apache Software License'
    ]
)
