"""
Утилиты и скрипты для работы с проектом spmd-kmeans.

Модули:
- generate_numbers: генерация байтовых датасетов
"""
