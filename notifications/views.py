# notifications/views.py
#
# POST /api/contact/ {"name", "email", "message"}
# - 200 {"message": "Email sent successfully"}
# - 500 {"message": "Failed to send email", "error": "..."} when the relay fails
#
from rest_framework import serializers, status
from rest_framework.response import Response
from rest_framework.views import APIView

from .mail_relay import MailRelay


class ContactSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=200)
    email = serializers.EmailField()
    message = serializers.CharField()


class ContactView(APIView):
    authentication_classes = []
    relay = MailRelay()

    def post(self, request):
        serializer = ContactSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        record = self.relay.send_contact_message(data["name"], data["email"], data["message"])
        if not record.sent:
            return Response(
                {"message": "Failed to send email", "error": record.error},
                status=status.HTTP_500_INTERNAL_SERVER_ERROR,
            )
        return Response({"message": "Email sent successfully"}, status=status.HTTP_200_OK)
