from rest_framework import serializers

from .models import KitchenCompileSettings, KitchenTimer


class KitchenTimerSerializer(serializers.ModelSerializer):
    class Meta:
        model = KitchenTimer
        fields = ["id", "name", "seconds_left", "total_seconds", "running", "created_at", "updated_at"]
        read_only_fields = fields


class SaveKitchenTimerSerializer(serializers.Serializer):
    """Body of a timer save. Sending an id overwrites that timer."""

    id = serializers.IntegerField(required=False, allow_null=True)
    name = serializers.CharField(max_length=100, required=False, allow_blank=True, default="")
    seconds_left = serializers.IntegerField(min_value=0)
    total_seconds = serializers.IntegerField(min_value=0)
    running = serializers.BooleanField(required=False, default=False)


class KitchenCompileSettingsSerializer(serializers.ModelSerializer):
    excluded_ingredients = serializers.ListField(child=serializers.CharField(), required=False, default=list)
    excluded_categories = serializers.ListField(child=serializers.CharField(), required=False, default=list)
    excluded_items = serializers.ListField(child=serializers.IntegerField(), required=False, default=list)

    class Meta:
        model = KitchenCompileSettings
        fields = ["excluded_ingredients", "excluded_categories", "excluded_items", "updated_at"]
        read_only_fields = ["updated_at"]
