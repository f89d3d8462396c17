# example_usage.py - Complete usage examples

import logging

from restmodel import RestBaseModel, RequestFailedError, settings

logging.basicConfig(level=logging.INFO)


class User(RestBaseModel, fields={
    "id": {"map": "_id"},
    "first_name": {"map": "firstName"},
    "email": {},
    "roles": {"default": []},
}, paths={
    "default": "users",
    "byEmail": "users/email/{email}",
}, result_list_field="items"):
    pass


def example_settings():
    """Register endpoints and api paths once at startup"""
    settings.add_endpoint([
        {"name": "api", "value": "http://localhost:8000", "default": True},
        {"name": "staging", "value": "https://staging.example.com"},
    ])
    settings.add_api_path({"name": "v1", "value": "/api/v1", "default": True})
    User.set_header("Authorization", "Bearer dev-token")


def example_preview_urls():
    """generate_only builds the URL without sending anything"""
    print(User.get(id=42, query_params={"expand": "roles"}, generate_only=True).result())
    print(User.get(id="ada@example.com", path="byEmail", path_data={"email": "ada@example.com"},
                   generate_only=True).result())
    print(User(id=42).save(endpoint_name="staging", generate_only=True).result())


def example_crud():
    """Create, read, update, list and delete against a running API"""
    user = User(first_name="Ada", email="ada@example.com")
    try:
        user.save().result(timeout=10)
        print(f"✅ Created user: {user.id}")

        fetched = User.get(id=user.id).result(timeout=10)["model"]
        print(f"✅ Fetched user: {fetched.first_name}")

        fetched.email = "lovelace@example.com"
        fetched.save(update_method="patch", data_keys=["email"]).result(timeout=10)
        print("✅ Patched email")

        users = []
        User.all(result_list=users, query_params={"page": 1}).result(timeout=10)
        print(f"✅ Listed {len(users)} users")

        user.delete().result(timeout=10)
        print("✅ Deleted user")
    except RequestFailedError as e:
        print(f"❌ Request failed: {e}")
    finally:
        settings.close()


if __name__ == "__main__":
    example_settings()
    example_preview_urls()
    example_crud()
