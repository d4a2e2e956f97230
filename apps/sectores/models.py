from django.db import models


class Sector(models.Model):
    name = models.CharField(max_length=100, unique=True)

    class Meta:
        db_table = 'sector'
        ordering = ['name']
        verbose_name = 'Setor'
        verbose_name_plural = 'Setores'

    def __str__(self):
        return self.name
