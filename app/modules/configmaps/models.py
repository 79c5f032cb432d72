# OpenShift ConfigMap consumed by the Spring Boot lab application
# This file documents the expected keys
# The ConfigMap itself lives in the cluster and is created with oc; nothing here talks to OpenShift

"""
Expected ConfigMap data (application.properties style):
- spring.datasource.url: text (not empty) - e.g. jdbc:postgresql://inventory-postgresql:5432/inventory
- spring.datasource.username: text (not empty)
- spring.datasource.password: text (not empty)
- spring.datasource.driver-class-name: text (not empty) - e.g. org.postgresql.Driver
- spring.jpa.hibernate.ddl-auto: text - one of none, validate, update, create, create-drop
"""

REQUIRED_KEYS = [
    "spring.datasource.url",
    "spring.datasource.username",
    "spring.datasource.password",
    "spring.datasource.driver-class-name",
    "spring.jpa.hibernate.ddl-auto",
]

DDL_AUTO_KEY = "spring.jpa.hibernate.ddl-auto"
DDL_AUTO_VALUES = ["none", "validate", "update", "create", "create-drop"]
