"""
Serializers for users, staff management, audit logs and settings.
"""
from rest_framework import serializers
from django.contrib.auth.password_validation import validate_password

from network.models import District, Province
from .models import Log, Setting, User


class AssignmentSerializer(serializers.Serializer):
    """Compact province/district reference."""
    id = serializers.UUIDField()
    name = serializers.CharField()
    code = serializers.CharField()


class UserSerializer(serializers.ModelSerializer):
    """
    Read-only view of a user with their geographic assignment.
    """
    assigned_province = AssignmentSerializer(read_only=True)
    assigned_district = AssignmentSerializer(read_only=True)

    class Meta:
        model = User
        fields = [
            'id', 'email', 'name', 'role', 'image', 'is_active',
            'assigned_province', 'assigned_district',
            'last_login', 'created_at', 'updated_at'
        ]
        read_only_fields = fields


class LoginSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, trim_whitespace=False)


class StaffSerializer(serializers.ModelSerializer):
    """
    Create and update STAFF accounts.

    The password is required on create and left untouched on update unless
    a new one is sent. A district implies its province; sending a district
    from another province is rejected.
    """
    password = serializers.CharField(write_only=True, required=False, trim_whitespace=False)
    assigned_province_id = serializers.PrimaryKeyRelatedField(
        source='assigned_province', queryset=Province.objects.all(),
        required=False, allow_null=True
    )
    assigned_district_id = serializers.PrimaryKeyRelatedField(
        source='assigned_district', queryset=District.objects.select_related('province'),
        required=False, allow_null=True
    )
    assigned_province = AssignmentSerializer(read_only=True)
    assigned_district = AssignmentSerializer(read_only=True)

    class Meta:
        model = User
        fields = [
            'id', 'email', 'name', 'role', 'is_active', 'password',
            'assigned_province_id', 'assigned_district_id',
            'assigned_province', 'assigned_district',
            'created_at', 'updated_at'
        ]
        read_only_fields = ['id', 'role', 'created_at', 'updated_at']
        extra_kwargs = {
            'name': {'required': True, 'allow_blank': False},
            'email': {'validators': []},
        }

    def validate_email(self, value):
        value = value.lower()
        queryset = User.objects.filter(email__iexact=value)
        if self.instance is not None:
            queryset = queryset.exclude(pk=self.instance.pk)
        if queryset.exists():
            raise serializers.ValidationError('Email already exists')
        return value

    def validate(self, attrs):
        if self.instance is None and not attrs.get('password'):
            raise serializers.ValidationError({'password': ['This field is required.']})

        if attrs.get('password'):
            validate_password(attrs['password'])

        province_given = 'assigned_province' in attrs
        district_given = 'assigned_district' in attrs
        province = attrs['assigned_province'] if province_given else (
            self.instance.assigned_province if self.instance else None
        )
        district = attrs['assigned_district'] if district_given else (
            self.instance.assigned_district if self.instance else None
        )

        if district is not None:
            if province is None or (district_given and not province_given):
                attrs['assigned_province'] = district.province
            elif district.province_id != province.pk:
                raise serializers.ValidationError({
                    'assigned_district_id': ['District does not belong to the assigned province']
                })
        return attrs

    def create(self, validated_data):
        password = validated_data.pop('password')
        validated_data['role'] = User.Role.STAFF
        return User.objects.create_user(password=password, **validated_data)

    def update(self, instance, validated_data):
        password = validated_data.pop('password', None)

        for attr, value in validated_data.items():
            setattr(instance, attr, value)

        if password:
            instance.set_password(password)

        instance.save()
        return instance


class ProfileSerializer(serializers.ModelSerializer):
    """
    Self-service profile update: name and email only.
    """

    class Meta:
        model = User
        fields = ['id', 'name', 'email']
        read_only_fields = ['id']
        extra_kwargs = {
            'name': {'required': True, 'allow_blank': False},
            'email': {'required': True, 'validators': []},
        }

    def validate_email(self, value):
        value = value.lower()
        if User.objects.filter(email__iexact=value).exclude(pk=self.instance.pk).exists():
            raise serializers.ValidationError('Email is already taken by another user')
        return value


class ChangePasswordSerializer(serializers.Serializer):
    """
    Serializer for password change functionality.
    """
    current_password = serializers.CharField(required=True, trim_whitespace=False)
    new_password = serializers.CharField(required=True, trim_whitespace=False)

    def validate_current_password(self, value):
        user = self.context['request'].user
        if not user.check_password(value):
            raise serializers.ValidationError('Current password is incorrect')
        return value

    def validate(self, attrs):
        validate_password(attrs['new_password'], user=self.context['request'].user)
        return attrs


class LogSerializer(serializers.ModelSerializer):
    """
    Audit entry with the acting user's name and email.
    """
    user = serializers.SerializerMethodField()

    class Meta:
        model = Log
        fields = ['id', 'action', 'details', 'ip_address', 'user_agent', 'timestamp', 'user']
        read_only_fields = fields

    def get_user(self, obj):
        return {'id': str(obj.user_id), 'name': obj.user.name, 'email': obj.user.email}


class SettingSerializer(serializers.ModelSerializer):

    class Meta:
        model = Setting
        fields = ['id', 'key', 'value', 'description', 'category', 'updated_at']
        read_only_fields = ['id', 'updated_at']


class SettingEntrySerializer(serializers.Serializer):
    key = serializers.CharField(max_length=100)
    value = serializers.JSONField(allow_null=True)
    description = serializers.CharField(required=False, allow_blank=True)
    category = serializers.CharField(required=False, max_length=50)


class SettingsUpdateSerializer(serializers.Serializer):
    settings = SettingEntrySerializer(many=True, allow_empty=False)
