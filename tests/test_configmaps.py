"""Spring datasource ConfigMap shape checks."""

from app.modules.configmaps.service import parse_properties, check_configmap

VALID_DATA = {
    "spring.datasource.url": "jdbc:postgresql://inventory-postgresql:5432/inventory",
    "spring.datasource.username": "inventory",
    "spring.datasource.password": "secret",
    "spring.datasource.driver-class-name": "org.postgresql.Driver",
    "spring.jpa.hibernate.ddl-auto": "create",
}

PROPERTIES = """\
# inventory datasource
spring.datasource.url=jdbc:postgresql://inventory-postgresql:5432/inventory
spring.datasource.username = inventory
! legacy comment
spring.datasource.password: secret
spring.datasource.driver-class-name=org.postgresql.Driver

spring.jpa.hibernate.ddl-auto=create
"""


def test_parse_properties():
    assert parse_properties(PROPERTIES) == VALID_DATA


def test_parse_properties_splits_on_first_separator():
    assert parse_properties("url=jdbc:postgresql://db:5432/x") == {"url": "jdbc:postgresql://db:5432/x"}
    assert parse_properties("flag") == {"flag": ""}


def test_check_valid():
    result = check_configmap(VALID_DATA)
    assert result.valid
    assert result.missing_keys == []
    assert result.empty_keys == []
    assert result.ddl_auto_valid
    assert "spring.datasource.password" not in result.keys


def test_check_missing_and_empty():
    data = dict(VALID_DATA)
    del data["spring.datasource.url"]
    data["spring.datasource.username"] = "  "
    result = check_configmap(data)
    assert not result.valid
    assert result.missing_keys == ["spring.datasource.url"]
    assert result.empty_keys == ["spring.datasource.username"]


def test_invalid_ddl_auto_is_reported_separately():
    result = check_configmap({**VALID_DATA, "spring.jpa.hibernate.ddl-auto": "drop-everything"})
    assert result.valid
    assert result.missing_keys == []
    assert not result.ddl_auto_valid


def test_keys_endpoint(client):
    response = client.get("/api/v1/configmaps/spring-datasource/keys")
    assert response.status_code == 200
    assert response.json()["required_keys"] == list(VALID_DATA.keys())
    assert "create-drop" in response.json()["ddl_auto_values"]


def test_check_endpoint_with_data(client):
    response = client.post("/api/v1/configmaps/spring-datasource/check", json={"data": VALID_DATA})
    assert response.status_code == 200
    assert response.json()["valid"] is True


def test_check_endpoint_with_properties(client):
    response = client.post(
        "/api/v1/configmaps/spring-datasource/check",
        json={"properties": "spring.datasource.url=jdbc:postgresql://db/x\n"},
    )
    assert response.status_code == 200
    body = response.json()
    assert body["valid"] is False
    assert "spring.datasource.username" in body["missing_keys"]


def test_check_endpoint_requires_exactly_one_input(client):
    assert client.post("/api/v1/configmaps/spring-datasource/check", json={}).status_code == 422
    both = {"data": VALID_DATA, "properties": PROPERTIES}
    assert client.post("/api/v1/configmaps/spring-datasource/check", json=both).status_code == 422
