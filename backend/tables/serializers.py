from rest_framework import serializers

from .models import Table


class TableSerializer(serializers.ModelSerializer):
    class Meta:
        model = Table
        fields = ["number", "is_occupied", "updated_at"]
        read_only_fields = fields


class MoveOrderSerializer(serializers.Serializer):
    new_table_number = serializers.IntegerField(min_value=1)


class MergeOrderSerializer(serializers.Serializer):
    target_table_number = serializers.IntegerField(min_value=1)
