from django.apps import AppConfig


class CategoriesConfig(AppConfig):
    name = "modules.categories"
    label = "categories"
