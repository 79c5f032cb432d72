# Workshop definition file (one per entry in WORKSHOPS_URLS)
# This file documents the expected YAML layout
# Parsing is handled by parse_workshop_definition in service.py

"""
Expected workshop definition structure:
- id: text (optional, defaults to the file name without extension)
- name: text (optional, defaults to id)
- description: text (optional)
- content.url: text (optional) - base URL or directory for lab files and images;
  falls back to CONTENT_URL_PREFIX, then to the directory of the definition itself
- vars: mapping (optional) - template values shared by every lab, scalars are stringified
- modules: list (required, at least one) - lab pages in display order. Each entry is either
  a bare module id or a mapping:
    - id: text (required, unique within the workshop)
    - name: text (optional, defaults to id)
    - file: text (optional, defaults to "<id>.md") - relative to the content base, or an absolute URL
    - vars: mapping (optional) - template values for this lab only
  A mapping with an "activate" list is also accepted: modules: {activate: [...]}

Example:

    id: spring-boot-config
    name: Externalized Configuration with Spring Boot
    content:
      url: https://raw.githubusercontent.com/example/labs/master/docs
    vars:
      PROJECT: coolstore
    modules:
      - id: config-management
        name: Managing Application Configuration
      - README
"""
