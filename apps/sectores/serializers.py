from rest_framework import serializers
from rest_framework.validators import UniqueValidator

from core.constants import Messages
from .models import Sector


class SectorSerializer(serializers.ModelSerializer):
    name = serializers.CharField(
        max_length=100,
        validators=[
            UniqueValidator(
                queryset=Sector.objects.all(),
                message=Messages.SECTOR_NAME_EXISTS,
                lookup='iexact'
            )
        ]
    )

    class Meta:
        model = Sector
        fields = ['id', 'name']

    def validate_name(self, value):
        return value.strip()
